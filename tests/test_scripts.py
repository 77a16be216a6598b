from bpmn_inline.scripts import BANNER_PREFIX, banner, combine_scripts, standalone_script


def test_segments_keep_order_and_blank_line_separation():
    combined = combine_scripts(["A();", "B();", "C();"])
    assert combined == "A();\n\nB();\n\nC();"


def test_segments_are_trimmed():
    combined = combine_scripts(["\n\nA();\n\n\n", "  \nB();   \n", "  C();\n"])
    assert combined == "A();\n\nB();\n\n  C();"


def test_empty_segments_are_skipped():
    assert combine_scripts(["", "   \n", "app();"]) == "app();"


def test_banner_lists_parts():
    line = banner(["bpmn-js modeler", "jquery", "app bundle"])
    assert line.startswith(BANNER_PREFIX)
    assert "bpmn-js modeler + jquery + app bundle" in line
    assert "\n" not in line
    assert line.endswith("*/")


def test_standalone_script_is_newline_terminated():
    out = standalone_script("/* b */", "foo();\n\n")
    assert out == "/* b */\nfoo();\n"


def test_standalone_script_keeps_first_line_indentation():
    out = standalone_script("/* b */", "  (function () {})();\n")
    assert out == "/* b */\n  (function () {})();\n"
