#  repocards - Swift / Kotlin Extractor Tests

from extractors import extract_blocks
from extractors.base import SourceFile
from extractors.swift import extract_visibility

SWIFT_SAMPLE = """\
import Foundation

public protocol Drawable {
    func draw()
}

public struct Circle: Drawable {
    public let radius: Double

    public func draw() {
        print("circle")
    }
}

public func makeCircle(radius: Double) -> Circle {
    return Circle(radius: radius)
}

func internalHelper() {}
"""

KOTLIN_SAMPLE = """\
package demo

public interface Repo {
    fun find(id: Int): String?
}

public data class User(
    val id: Int,
    val name: String
) {
    fun display() = "$id $name"
}

public fun greet(name: String): String {
    return "Hello, $name"
}

public fun square(x: Int) = x * x
"""


def test_swift_functions_and_types():
    """Public funcs are functions; protocols are types, structs are concepts."""
    blocks = extract_visibility("Sources/Shapes.swift", SWIFT_SAMPLE, "swift")
    assert [(b.name, b.kind) for b in blocks] == [
        ("draw", "function"),
        ("makeCircle", "function"),
        ("Drawable", "type"),
        ("Circle", "concept"),
    ]


def test_swift_no_doc_text():
    """Visibility-keyword languages carry no doc text."""
    blocks = extract_visibility("Sources/Shapes.swift", SWIFT_SAMPLE, "swift")
    assert all(b.doc_text is None for b in blocks)


def test_swift_protocol_requirement_not_a_function():
    """A non-public, bodiless requirement inside a protocol is not extracted."""
    blocks = extract_visibility("Sources/Shapes.swift", SWIFT_SAMPLE, "swift")
    assert "internalHelper" not in [b.name for b in blocks]
    drawable = next(b for b in blocks if b.name == "Drawable")
    assert drawable.code == "public protocol Drawable {\n    func draw()\n}"


def test_kotlin_primary_constructor_and_expression_body():
    """Multi-line constructors are stepped over; expression-bodied funs are skipped."""
    blocks = extract_blocks(SourceFile("src/main/kotlin/Demo.kt", KOTLIN_SAMPLE))
    assert [(b.name, b.kind) for b in blocks] == [
        ("greet", "function"),
        ("Repo", "type"),
        ("User", "concept"),
    ]
    user = next(b for b in blocks if b.name == "User")
    assert user.code.startswith("public data class User(")
    assert user.code.endswith('    fun display() = "$id $name"\n}')
    assert all(b.language == "kotlin" for b in blocks)
