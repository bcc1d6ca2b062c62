#  repocards - Rust Extractor Tests

from extractors.rust import extract_rust

SAMPLE = """\
use std::fmt::{self, Display, Formatter};

/// A 2D point.
#[derive(Debug, Clone)]
pub struct Point {
    pub x: f64,
    pub y: f64,
}

/// Distance from origin.
pub fn norm(p: &Point) -> f64 {
    (p.x * p.x + p.y * p.y).sqrt()
}

pub struct Meters(pub f64);

impl<'a> Display for Point {
    fn fmt(&self, f: &mut Formatter<'_>) -> fmt::Result {
        write!(f, "({}, {})", self.x, self.y)
    }
}

pub trait Shape {
    fn area(&self) -> f64;
}

fn private_helper() -> u8 {
    0
}
"""


def _blocks():
    return extract_rust("src/geom.rs", SAMPLE, "rust")


def test_items_and_kinds():
    """pub fns are functions, pub structs/traits are types, impls are concepts."""
    assert [(b.name, b.kind) for b in _blocks()] == [
        ("norm", "function"),
        ("Point", "type"),
        ("Meters", "type"),
        ("Shape", "type"),
        ("Display for Point", "concept"),
    ]


def test_attributes_kept_and_doc_found():
    """#[derive] lines stay with the struct; /// above them is the doc."""
    point = next(b for b in _blocks() if b.name == "Point")
    assert point.code.startswith("#[derive(Debug, Clone)]\npub struct Point {")
    assert point.code.endswith("}")
    assert point.doc_text == "A 2D point."


def test_fn_doc():
    """/// lines directly above a fn are its doc."""
    norm = next(b for b in _blocks() if b.name == "norm")
    assert norm.doc_text == "Distance from origin."
    assert norm.line_count == 3


def test_tuple_struct_runs_to_semicolon():
    """A tuple struct without a body ends at its semicolon."""
    meters = next(b for b in _blocks() if b.name == "Meters")
    assert meters.code == "pub struct Meters(pub f64);"


def test_impl_with_lifetimes():
    """Lifetimes don't confuse the brace matcher."""
    imp = next(b for b in _blocks() if b.kind == "concept")
    assert imp.code.startswith("impl<'a> Display for Point {")
    assert imp.code.endswith("    }\n}")
    assert imp.line_count == 5


def test_private_fn_ignored():
    """Functions without pub are skipped."""
    assert "private_helper" not in [b.name for b in _blocks()]
