"""
Detection of unmodified starter code.

Each submission is compared against the instructor's reference
implementation, first as a whole file and then function by function.
Function bodies are extracted by brace-balanced scanning, so nested
blocks (a conditional inside a loop, and so on) are kept intact.
"""
import logging
import re
from typing import Iterable, Optional

from .comparator import compare_artifact
from .models import DefaultImplementationFinding

logger = logging.getLogger(__name__)

WHOLE_FILE_THRESHOLD = 95
FUNCTION_THRESHOLD = 90

_QUOTES = "'\"`"
_MODIFIERS = r"(?:(?:export|default|public|private|protected|static|async|override|const|let|var)[ \t]+)*"
# Whitespace, an optional ": Type" annotation and an optional "=>", then "{"
_BODY_OPENER_RE = re.compile(r"\s*(?::[\w\s.<>\[\],|&?]*?)?(?:=>\s*)?\{")


def _string_end(source: str, start: int) -> int:
    """Index just past the string literal opened at `start`."""
    quote = source[start]
    i = start + 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            # Unterminated single-line literal
            return i
        i += 1
    return n


def mask_non_code(source: str) -> str:
    """
    Blank out comments and string literals, keeping every index in place.

    Newlines are preserved so line-anchored patterns still work.

    Examples:
        >>> mask_non_code('a("}") // }')
        'a(   )     '
    """
    chars = list(source)
    n = len(source)
    i = 0
    while i < n:
        ch = source[i]
        nxt = source[i + 1:i + 2]
        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            end = n if end == -1 else end
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
        elif ch in _QUOTES:
            end = _string_end(source, i)
        else:
            i += 1
            continue

        for k in range(i, end):
            if chars[k] != "\n":
                chars[k] = " "
        i = end
    return "".join(chars)


def _declaration_patterns(function_name: str) -> list[re.Pattern]:
    name = re.escape(function_name)
    return [
        # function name(...) / export async function name<T>(...)
        re.compile(rf"\bfunction\b\s*\*?\s*{name}\s*(?:<[^>]*>)?\s*\("),
        # Class methods and arrow functions bound to a name
        re.compile(
            rf"^[ \t]*{_MODIFIERS}{name}\s*(?:<[^>]*>)?\s*(?::[^=\n]*)?(?:=\s*(?:async\s*)?)?\(",
            re.MULTILINE,
        ),
        # C-style definitions with a return type
        re.compile(rf"^[ \t]*(?:[\w:<>,*&\[\]]+[ \t]+)+[*&]*{name}\s*\(", re.MULTILINE),
    ]


def _find_body_bounds(masked: str, params_start: int) -> Optional[tuple[int, int]]:
    """
    Locate the body of a declaration whose parameter list opens at params_start.

    Returns:
        (open_brace, close_brace) indices, or None if the declaration is a
        prototype or call, or its braces never balance
    """
    n = len(masked)
    depth = 1
    i = params_start
    while i < n and depth:
        if masked[i] == "(":
            depth += 1
        elif masked[i] == ")":
            depth -= 1
        i += 1
    if depth:
        return None

    # Only a return type annotation and/or an arrow may sit between ")" and "{"
    opener = _BODY_OPENER_RE.match(masked, i)
    if opener is None:
        return None

    open_brace = opener.end() - 1
    depth = 0
    for j in range(open_brace, n):
        if masked[j] == "{":
            depth += 1
        elif masked[j] == "}":
            depth -= 1
            if depth == 0:
                return open_brace, j
    return None


def extract_function(source: str, function_name: str) -> str:
    """
    Extract the body of a named function from source code.

    The declaration is located first; the body is then found by counting
    nested braces, ignoring braces inside comments and string literals.

    Args:
        source: Complete source file
        function_name: Name of the function to extract

    Returns:
        Body text between the outer braces (stripped), or "" if not found

    Examples:
        >>> extract_function("function f(x) { if (x) { return 1; } return 2; }", "f")
        'if (x) { return 1; } return 2;'
        >>> extract_function("function g() {}", "f")
        ''
    """
    if not source or not function_name:
        return ""

    masked = mask_non_code(source)
    for pattern in _declaration_patterns(function_name):
        for match in pattern.finditer(masked):
            bounds = _find_body_bounds(masked, match.end())
            if bounds:
                open_brace, close_brace = bounds
                return source[open_brace + 1:close_brace].strip()
    return ""


class ReferenceImplementation:
    """
    The instructor's baseline solution for one assignment.

    Reference function bodies are extracted once and reused for every
    student checked against this reference.
    """

    def __init__(
        self,
        code: Optional[str],
        function_names: Iterable[str],
        whole_file_threshold: int = WHOLE_FILE_THRESHOLD,
        function_threshold: int = FUNCTION_THRESHOLD,
    ):
        self.code = code
        self.function_names = list(function_names)
        self.whole_file_threshold = whole_file_threshold
        self.function_threshold = function_threshold
        self._bodies = {
            name: extract_function(code or "", name) for name in self.function_names
        }

    def function_body(self, function_name: str) -> str:
        if function_name not in self._bodies:
            self._bodies[function_name] = extract_function(self.code or "", function_name)
        return self._bodies[function_name]

    def check(self, student_id: str, student_code: Optional[str]) -> DefaultImplementationFinding:
        """
        Check one student's code against this reference.

        Args:
            student_id: Student identifier
            student_code: Student's source, or None if the file is missing

        Returns:
            DefaultImplementationFinding with matched function names
        """
        if not self.code or not student_code:
            return DefaultImplementationFinding(student_id=student_id)

        file_score = compare_artifact(student_code, self.code)
        if file_score >= self.whole_file_threshold:
            logger.warning(
                f"Student {student_id} file is {file_score}% similar to the reference file"
            )
            return DefaultImplementationFinding(
                student_id=student_id,
                default_functions=list(self.function_names),
                whole_copy_paste=True,
            )

        matched = []
        for name in self.function_names:
            reference_body = self.function_body(name)
            if not reference_body:
                logger.debug(f"Function {name} not found in reference, skipping")
                continue

            student_body = extract_function(student_code, name)
            if not student_body:
                continue

            score = compare_artifact(reference_body, student_body)
            if score >= self.function_threshold:
                logger.debug(f"{student_id}: {name} is {score}% similar to reference")
                matched.append(name)

        return DefaultImplementationFinding(student_id=student_id, default_functions=matched)


def detect_default_implementation(
    student_id: str,
    student_code: Optional[str],
    reference_code: Optional[str],
    function_names: Iterable[str],
    whole_file_threshold: int = WHOLE_FILE_THRESHOLD,
    function_threshold: int = FUNCTION_THRESHOLD,
) -> DefaultImplementationFinding:
    """
    Detect functions a student left identical to the reference implementation.

    A whole-file score of 95 or more marks every function as unmodified and
    skips per-function work. Otherwise each function body is compared on its
    own and matched at 90 or more.
    """
    reference = ReferenceImplementation(
        reference_code,
        function_names,
        whole_file_threshold=whole_file_threshold,
        function_threshold=function_threshold,
    )
    return reference.check(student_id, student_code)
