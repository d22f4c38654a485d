"""Tests for exporter template parsing and rendering."""

import pytest

from collurgy.errors import InvalidParameter, MissingExtra, TemplateParseError
from collurgy.export.template import (
    Placeholder,
    parse_template,
    render,
    template_from_source,
)


def test_render_substitution(make_theme):
    template = parse_template("{NAME} {HEX0} {HEX15} {ACCHEX}", set(), None)
    rendered = render(template, make_theme())
    assert rendered.text == "Test 000000 ffffff ff00ff"
    assert rendered.path is None


def test_extras_substitution(make_theme):
    template = parse_template("{CONSTANTHEX}", {"CONSTANT"}, "out.txt", name="demo")
    rendered = template.render(make_theme(extras={"CONSTANT": 3}))
    assert rendered.text == "112233"
    assert rendered.path == "out.txt"


def test_missing_extra_fails(make_theme):
    template = parse_template("{CONSTANTHEX}", {"CONSTANT"}, None, name="demo")
    with pytest.raises(MissingExtra) as excinfo:
        render(template, make_theme())
    assert excinfo.value.name == "CONSTANT"
    assert excinfo.value.template == "demo"
    assert "CONSTANT" in str(excinfo.value)


def test_declared_extra_is_required_even_if_unused(make_theme):
    template = parse_template("{NAME}", {"ERROR"}, None)
    with pytest.raises(MissingExtra):
        render(template, make_theme())


def test_unknown_tokens_pass_through(make_theme):
    template = parse_template("a {UNKNOWN_TOKEN} b {hex0} {FOOHEX} {}", set(), None)
    assert render(template, make_theme()).text == "a {UNKNOWN_TOKEN} b {hex0} {FOOHEX} {}"


@pytest.mark.parametrize(
    "text",
    [
        "a {NAME-suffix} {HEX0 } b",
        "{ACCHEX:x}",
        "{ NAME}",
        "{HEX3 here}",
        "{NAME.upper()}",
    ],
)
def test_closed_spans_outside_grammar_pass_through(make_theme, text):
    template = parse_template(text, set(), None)
    assert template.placeholders() == []
    assert render(template, make_theme()).text == text


def test_closed_span_beside_placeholder(make_theme):
    template = parse_template("{NAME-x}{NAME}{HEX0 }{HEX0}", set(), None)
    assert render(template, make_theme()).text == "{NAME-x}Test{HEX0 }000000"


def test_brace_formats_coexist(make_theme):
    body = '{\n  "name": "{NAME}",\n  "bg": { "color": "#{HEX0}" }\n}\n'
    rendered = render(parse_template(body, set(), None), make_theme())
    assert rendered.text == '{\n  "name": "Test",\n  "bg": { "color": "#000000" }\n}\n'


def test_adjacent_braces(make_theme):
    template = parse_template("{{HEX3}}", set(), None)
    assert render(template, make_theme()).text == "{112233}"


def test_substituted_values_are_not_rescanned(make_theme):
    template = parse_template("{NAME}", set(), None)
    assert render(template, make_theme(name="{HEX0}")).text == "{HEX0}"
    assert render(template, make_theme(name="{{ACCHEX}}")).text == "{{ACCHEX}}"


def test_text_without_placeholders(make_theme):
    template = parse_template("plain text", set(), None)
    assert template.segments == ("plain text",)
    assert render(template, make_theme()).text == "plain text"
    assert render(parse_template("", set(), None), make_theme()).text == ""


def test_segments():
    template = parse_template("fg={HEX15};{ERRORHEX}", {"ERROR"}, None)
    assert template.segments == (
        "fg=",
        Placeholder("hex", 15),
        ";",
        Placeholder("extra", "ERROR"),
    )
    assert len(template.placeholders()) == 2


def test_slot_outside_palette_fails():
    with pytest.raises(TemplateParseError):
        parse_template("{HEX16}", set(), None)
    template = parse_template("{HEX7}", set(), None, size=8)
    assert template.size == 8
    with pytest.raises(TemplateParseError):
        parse_template("{HEX8}", set(), None, size=8)


def test_unterminated_placeholder_fails():
    with pytest.raises(TemplateParseError, match="line 2"):
        parse_template("ok {HEX0}\nbroken {HEX3 here", set(), None)
    with pytest.raises(TemplateParseError):
        parse_template("{NAME", set(), None)
    with pytest.raises(TemplateParseError):
        parse_template("{ERRORHEX", {"ERROR"}, None)
    with pytest.raises(TemplateParseError, match="line 1"):
        parse_template("{HEX3\n}", set(), None)
    with pytest.raises(TemplateParseError):
        parse_template("{NAME {HEX0}", set(), None)
    with pytest.raises(TemplateParseError):
        parse_template("{NAME-suffix", set(), None)


def test_unterminated_non_placeholder_passes(make_theme):
    template = parse_template("a {b and {FOOHEX", set(), None)
    assert render(template, make_theme()).text == "a {b and {FOOHEX"


@pytest.mark.parametrize("name", ["", "ACC", "bad-name", "with space", 3])
def test_bad_extra_names_fail(name):
    with pytest.raises(TemplateParseError):
        parse_template("{NAME}", {name}, None)


@pytest.mark.parametrize("size", [0, -1, True, 16.0])
def test_bad_size_fails(size):
    with pytest.raises(TemplateParseError):
        parse_template("{NAME}", set(), None, size=size)


def test_palette_size_mismatch_fails(make_theme):
    template = parse_template("{HEX0}", set(), None, size=8)
    with pytest.raises(InvalidParameter):
        render(template, make_theme())


def test_template_is_reused_across_themes(make_theme, hex_palette):
    template = parse_template("{NAME}:{HEX0}", set(), None)
    other = list(hex_palette)
    other[0] = "abcdef"
    assert render(template, make_theme(name="A")).text == "A:000000"
    assert render(template, make_theme(name="B", palette=other)).text == "B:abcdef"


TOML_SOURCE = '''
name = "Demo"
path = "~/.config/demo.conf"
extras = {CONSTANT = 3, ERROR = 1}
formatter = """
name={NAME}
constant=#{CONSTANTHEX}
"""
'''


def test_template_from_toml_source(make_theme):
    template = template_from_source(TOML_SOURCE)
    assert template.name == "Demo"
    assert template.path == "~/.config/demo.conf"
    assert template.extras == {"CONSTANT", "ERROR"}
    assert template.suggested_extras == {"CONSTANT": 3, "ERROR": 1}

    theme = make_theme(extras={"CONSTANT": 3, "ERROR": 1})
    assert render(template, theme).text == "name=Test\nconstant=#112233\n"


def test_template_from_json_source(make_theme):
    source = '{"formatter": "{NAME}={HEX1}", "size": 16}'
    template = template_from_source(source, fmt="json", default_name="json-demo")
    assert template.name == "json-demo"
    assert template.path is None
    assert template.extras == frozenset()


@pytest.mark.parametrize(
    "source",
    [
        'name = "x"',
        'formatter = 3',
        'formatter = "{NAME}"\npath = 4',
        'formatter = "{NAME}"\nextras = 3',
        'formatter = "{NAME}"\nextras = {CONSTANT = "three"}',
        'formatter = "{NAME}"\nextras = {CONSTANT = 16}',
        'formatter = "{NAME}"\nname = 5',
        'formatter = "{NAME}',
        'formatter = "{NAME}"\nformatter = "{NAME}"',
    ],
)
def test_malformed_sources_fail(source):
    with pytest.raises(TemplateParseError):
        template_from_source(source)


def test_unsupported_source_format():
    with pytest.raises(TemplateParseError):
        template_from_source("formatter: x", fmt="yaml")
