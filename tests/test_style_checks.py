from __future__ import annotations

from harness_core.checkers import check_styles, find_block
from harness_core.rubric import DEFAULT_RUBRIC
from harness_core.types import StyleRule, Verdict


def _rule(selector: str, **props: str) -> StyleRule:
    return StyleRule(selector=selector, properties=tuple((k.replace("_", "-"), v) for k, v in props.items()))


def test_body_block_passes():
    css = "body { font-family: Arial, sans-serif; background-color: #f0f0f0; }"
    rules = [_rule("body", font_family="Arial, sans-serif", background_color="#f0f0f0")]
    assert check_styles(css, rules) == {"body": Verdict.PASS}


def test_missing_selector_fails_without_error():
    css = "body { color: red; }"
    assert check_styles(css, [_rule(".missing", color="red")]) == {".missing": Verdict.FAIL}


def test_wrong_value_fails_selector():
    css = "h2 { text-align: left; }"
    assert check_styles(css, [_rule("h2", text_align="center")]) == {"h2": Verdict.FAIL}


def test_whitespace_tolerance_and_last_declaration():
    css = "h2{text-align :center}\n.container {\n  padding:25px ;\n  max-width : 400px\n}"
    rules = [_rule("h2", text_align="center"), _rule(".container", padding="25px", max_width="400px")]
    assert check_styles(css, rules) == {"h2": Verdict.PASS, ".container": Verdict.PASS}


def test_only_first_block_is_considered():
    css = "p { color: blue; }\np { color: red; }"
    assert check_styles(css, [_rule("p", color="red")]) == {"p": Verdict.FAIL}
    assert "blue" in find_block(css, "p")


def test_selector_does_not_match_inside_longer_name():
    css = "tbody { color: red; }\n.dark-mode-extra { color: #fff; }"
    assert find_block(css, "body") is None
    assert check_styles(css, [_rule("body", color="red")]) == {"body": Verdict.FAIL}


def test_property_does_not_match_suffix():
    css = ".dark-mode { background-color: #fff; }"
    assert check_styles(css, [_rule(".dark-mode", color="#fff")]) == {".dark-mode": Verdict.FAIL}


def test_default_rubric_styles_pass_on_fixture(artifact_dir):
    css = (artifact_dir / "style.css").read_text(encoding="utf-8")
    entry = next(e for e in DEFAULT_RUBRIC if e.params.kind == "styles")
    outcome = check_styles(css, entry.params.rules)
    assert set(outcome) == {"body", ".container", "h2", ".dark-mode"}
    assert all(v is Verdict.PASS for v in outcome.values())
