from __future__ import annotations

import pytest

from syntax_me.config import ConfigError, FormatConfig
from syntax_me.stylesheet import format_stylesheet


def test_one_declaration_per_line():
    assert format_stylesheet("a{color:red;margin:0}") == "a {\n  color: red;\n  margin: 0;\n}\n"


def test_empty_rule():
    assert format_stylesheet("sel {}") == "sel {\n}\n"


def test_pseudo_class_selector_keeps_its_colon():
    raw = "a:hover{color:blue}\nb{margin:0 auto;}"
    assert format_stylesheet(raw) == "a:hover {\n  color: blue;\n}\nb {\n  margin: 0 auto;\n}\n"


def test_strings_are_copied_verbatim():
    raw = 'a{content:"x;{y}"}'
    assert format_stylesheet(raw) == 'a {\n  content: "x;{y}";\n}\n'


def test_leading_comment_gets_its_own_line():
    raw = "/* header */\na{color:red}"
    assert format_stylesheet(raw) == "/* header */\na {\n  color: red;\n}\n"


def test_comment_inside_rule_is_indented():
    raw = "a{/* note */color:red}"
    assert format_stylesheet(raw) == "a {\n  /* note */\n  color: red;\n}\n"


def test_nested_blocks_indent_further():
    raw = "@media (max-width:600px){a{color:red}}"
    assert format_stylesheet(raw) == (
        "@media (max-width:600px) {\n"
        "  a {\n"
        "    color: red;\n"
        "  }\n"
        "}\n"
    )


def test_raw_newlines_collapse_to_spaces():
    raw = "a,\nb{color:\nred}"
    assert format_stylesheet(raw) == "a, b {\n  color: red;\n}\n"


def test_colon_in_url_is_left_alone():
    assert format_stylesheet("@import url(http://x.css);") == "@import url(http://x.css);\n"


def test_double_slash_is_not_a_comment():
    raw = "a{background:url(//cdn.example.com/x.png)}"
    assert format_stylesheet(raw) == "a {\n  background: url(//cdn.example.com/x.png);\n}\n"


def test_custom_property_name():
    assert format_stylesheet("a{--main-color:#fff}") == "a {\n  --main-color: #fff;\n}\n"


def test_stray_closing_brace_does_not_dedent_below_zero():
    assert format_stylesheet("}a{b:c}") == "}\na {\n  b: c;\n}\n"


def test_trailing_text_without_block_is_kept():
    assert format_stylesheet('@charset "utf-8"') == '@charset "utf-8"\n'


def test_blank_input_produces_empty_output():
    assert format_stylesheet("") == ""
    assert format_stylesheet("  \n ") == ""


def test_indent_spaces_from_config():
    formatted = format_stylesheet("a{b:c}", FormatConfig(indent_spaces=4))
    assert formatted == "a {\n    b: c;\n}\n"


def test_tab_indentation():
    formatted = format_stylesheet("a{b:c}", FormatConfig(indent_chars="\t"))
    assert formatted == "a {\n\tb: c;\n}\n"


def test_invalid_config_is_rejected():
    with pytest.raises(ConfigError):
        format_stylesheet("a{b:c}", FormatConfig(indent_chars=""))


@pytest.mark.parametrize(
    "raw",
    [
        "a{color:red;margin:0}",
        "@media (max-width:600px){a{color:red}}",
        "/* header */\na{color:red}",
        'a{content:"x;{y}"}',
    ],
)
def test_formatting_is_idempotent(raw):
    once = format_stylesheet(raw)
    assert format_stylesheet(once) == once
