"""
Pytest configuration and shared fixtures for testing.
"""
import pytest
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from similarity.models import Submission


REFERENCE_CODE = """\
import { Turtle, Point } from "./turtle";

/**
 * Draws a square with the given side length.
 */
export function drawSquare(turtle: Turtle, sideLength: number): void {
  // TODO: Implement drawSquare
  for (let i = 0; i < 4; i++) {
    turtle.forward(sideLength);
    turtle.turn(90);
  }
}

export function chordLength(radius: number, angleInDegrees: number): number {
  const angleInRadians = (angleInDegrees * Math.PI) / 180;
  return 2 * radius * Math.sin(angleInRadians / 2);
}

export function distance(p1: Point, p2: Point): number {
  return 0; // TODO
}

export function findPath(turtle: Turtle, points: Point[]): string[] {
  const instructions: string[] = [];
  for (const point of points) {
    if (point.x > 0) {
      instructions.push("forward");
    } else {
      instructions.push("turn");
    }
  }
  return instructions;
}
"""

STUDENT_CODE = """\
import { Turtle, Point } from "./turtle";

export function drawSquare(turtle: Turtle, sideLength: number): void {
  for (let i = 0; i < 4; i++) {
    turtle.forward(sideLength);
    turtle.turn(90);
  }
}

export function chordLength(radius: number, angleInDegrees: number): number {
  const angleInRadians = (angleInDegrees * Math.PI) / 180;
  return 2 * radius * Math.sin(angleInRadians / 2);
}

export function distance(p1: Point, p2: Point): number {
  const dx = p2.x - p1.x;
  const dy = p2.y - p1.y;
  return Math.sqrt(dx * dx + dy * dy);
}

export function findPath(turtle: Turtle, points: Point[]): string[] {
  const result: string[] = [];
  let heading = 0;
  for (const target of points) {
    const targetHeading = Math.atan2(target.y, target.x) * 180 / Math.PI;
    result.push(`turn ${targetHeading - heading}`);
    result.push(`forward ${distance({ x: 0, y: 0 }, target)}`);
    heading = targetHeading;
  }
  return result;
}
"""

FUNCTION_NAMES = ["drawSquare", "chordLength", "distance", "findPath"]


@pytest.fixture(autouse=True)
def clean_similarity_env(monkeypatch):
    """Make sure environment overrides from the host do not leak into tests."""
    monkeypatch.delenv("SIMILARITY_THRESHOLD", raising=False)
    monkeypatch.delenv("SIMILARITY_BATCH_SIZE", raising=False)
    monkeypatch.delenv("SIMILARITY_CONFIG", raising=False)


@pytest.fixture
def reference_code():
    return REFERENCE_CODE


@pytest.fixture
def student_code():
    return STUDENT_CODE


@pytest.fixture
def function_names():
    return list(FUNCTION_NAMES)


@pytest.fixture
def make_submission():
    """Factory for single-file submissions."""
    def _make(student_id, content=None, path="src/turtlesoup.ts"):
        files = {} if content is None else {path: content}
        return Submission(student_id=student_id, files=files)
    return _make
