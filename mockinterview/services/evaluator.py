"""Run candidate JavaScript against a problem's test cases.

Each compile check and each test runs in its own Node.js process with a
wall-clock timeout, so an infinite loop or crash in one test cannot take
the others down with it.
"""
import json
import logging
import subprocess
from typing import Any, Optional

from mockinterview.errors import CompilationError, ConfigurationError, UnsupportedLanguage
from mockinterview.schemas.evaluation import EvaluationResult, TestOutcome

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = {"javascript"}

RESULT_MARKER = "__MOCKINTERVIEW_RESULT__"

TIMEOUT_MESSAGE = "Execution timeout"

# Reads {mode, code, input} from stdin. The candidate's code becomes the body of
# a function that must hand back `solve`; return values go through
# JSON.stringify/JSON.parse so only their JSON form is reported. The process
# exits as soon as the result is written, whatever timers the code left behind.
HARNESS_JS = r"""
const MARKER = %(marker)s;
const emit = (obj) => {
  process.stdout.write("\n" + MARKER + JSON.stringify(obj) + "\n", () => process.exit(0));
};
const messageOf = (err) => (err && err.message) ? String(err.message) : String(err);
const argsOf = (input) => {
  if (Array.isArray(input)) return input;
  if (input !== null && typeof input === "object") return Object.values(input);
  return [input];
};

const chunks = [];
process.stdin.on("data", (c) => chunks.push(c));
process.stdin.on("end", () => {
  const payload = JSON.parse(Buffer.concat(chunks).toString("utf8"));
  let solve;
  try {
    solve = new Function(
      payload.code +
      "\nif (typeof solve === 'undefined' || typeof solve !== 'function') {" +
      "\n  throw new Error('solve function not found. Please define a function named solve.');" +
      "\n}\nreturn solve;"
    )();
  } catch (err) {
    emit({ compileError: messageOf(err) || "Invalid JavaScript code" });
    return;
  }
  if (payload.mode === "compile") {
    emit({ ok: true });
    return;
  }
  try {
    const result = solve(...argsOf(payload.input));
    const text = JSON.stringify(result);
    emit(text === undefined ? { ok: true } : { ok: true, actual: JSON.parse(text) });
  } catch (err) {
    emit({ error: messageOf(err) || "Runtime error" });
  }
});
""" % {"marker": json.dumps(RESULT_MARKER)}


class NodeRuntime:
    """Executes the harness with a Node.js binary."""

    def __init__(self, node_binary: str = "node", timeout: float = 5):
        self.node_binary = node_binary
        self.timeout = timeout

    def execute(self, payload: dict) -> dict:
        compiling = payload.get("mode") == "compile"
        try:
            result = subprocess.run(
                [self.node_binary, "-e", HARNESS_JS],
                input=json.dumps(payload),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            # Top-level code that never finishes is a compile failure, not a pass
            return {"compileError": TIMEOUT_MESSAGE} if compiling else {"error": TIMEOUT_MESSAGE}
        except FileNotFoundError as e:
            raise ConfigurationError("Node.js runtime not available on server") from e

        for line in reversed(result.stdout.splitlines()):
            if line.startswith(RESULT_MARKER):
                return json.loads(line[len(RESULT_MARKER):])

        # The process died before reporting (process.exit, stack overflow, ...)
        stderr_lines = [l for l in result.stderr.strip().splitlines() if l.strip()]
        message = stderr_lines[-1] if stderr_lines else f"Process exited with code {result.returncode}"
        if compiling:
            return {"compileError": message}
        return {"error": message}


def canonical_json(value: Any) -> Any:
    return json.loads(json.dumps(value))


def values_equal(actual: Any, expected: Any) -> bool:
    """Structural equality over JSON values; key order is ignored, bools never equal numbers."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected

    if isinstance(actual, dict) and isinstance(expected, dict):
        if actual.keys() != expected.keys():
            return False
        return all(values_equal(actual[k], expected[k]) for k in actual)

    if isinstance(actual, list) and isinstance(expected, list):
        if len(actual) != len(expected):
            return False
        return all(values_equal(a, b) for a, b in zip(actual, expected))

    if isinstance(actual, (int, float)) and isinstance(expected, (int, float)):
        return actual == expected

    return type(actual) is type(expected) and actual == expected


def percentage(passed: int, total: int) -> int:
    """Integer percentage rounded half-up."""
    if total <= 0:
        return 0
    return (200 * passed + total) // (2 * total)


class JavaScriptEvaluator:
    def __init__(self, runtime):
        self.runtime = runtime

    def evaluate(self, code: str, tests: list[dict], language: str) -> EvaluationResult:
        total_tests = len(tests)
        if language not in SUPPORTED_LANGUAGES:
            raise UnsupportedLanguage(language, total_tests)

        compiled = self.runtime.execute({"mode": "compile", "code": code})
        if "compileError" in compiled:
            raise CompilationError(compiled["compileError"], total_tests)

        results = [self.run_test(code, test) for test in tests]
        passed_count = sum(1 for r in results if r.passed)
        score = percentage(passed_count, total_tests)

        logger.info("[Eval] %s/%s passed, score=%s", passed_count, total_tests, score)
        return EvaluationResult(
            results=results,
            passed_count=passed_count,
            total_tests=total_tests,
            score=score,
        )

    def run_test(self, code: str, test: dict) -> TestOutcome:
        test_input = test.get("input")
        expected = test.get("expected")
        description = str(test.get("description") or "")

        record = self.runtime.execute(
            {"mode": "run", "code": code, "input": test_input}
        )

        error: Optional[str] = record.get("error")
        if error is not None or "compileError" in record:
            return TestOutcome(
                description=description,
                input=test_input,
                expected=expected,
                actual=None,
                passed=False,
                error=error or record.get("compileError"),
            )

        # A missing "actual" means the function returned undefined (or a function);
        # it has no JSON form and never matches an expected value.
        if "actual" not in record:
            passed = False
            actual = None
        else:
            actual = record["actual"]
            passed = values_equal(canonical_json(actual), canonical_json(expected))

        return TestOutcome(
            description=description,
            input=test_input,
            expected=expected,
            actual=actual,
            passed=passed,
            error=None,
        )


def build_evaluator(node_binary: str = "node", timeout: float = 5) -> JavaScriptEvaluator:
    return JavaScriptEvaluator(NodeRuntime(node_binary=node_binary, timeout=timeout))
