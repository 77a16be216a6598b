from bpmn_inline.cli import main
from bpmn_inline.scripts import BANNER_PREFIX


def test_html_command(project, capsys):
    assert main(["--root", str(project.root), "html"]) == 0
    out = capsys.readouterr().out
    assert f"Wrote {project.resolve(project.output_html)}" in out
    assert project.resolve(project.output_html).is_file()


def test_all_in_one_without_transpile(project, capsys):
    assert main(["--root", str(project.root), "--quiet", "all-in-one", "--no-transpile"]) == 0
    assert capsys.readouterr().out == ""
    script = project.resolve(project.output_script).read_text(encoding="utf-8")
    assert script.startswith(BANNER_PREFIX)
    assert project.resolve(project.output_all_in_one).is_file()


def test_missing_input_reports_and_fails(project, capsys):
    (project.root / "dist" / "jquery.js").unlink()
    assert main(["--root", str(project.root), "all-in-one", "--no-transpile"]) == 1
    captured = capsys.readouterr()
    assert "missing required file" in captured.err
    assert "jquery.js" in captured.err
    assert captured.out == ""


def test_missing_placeholder_reports_and_fails(project, capsys):
    project.resolve(project.template).write_text("<html></html>", encoding="utf-8")
    assert main(["--root", str(project.root), "html"]) == 1
    assert "<!-- INLINE_BUNDLE -->" in capsys.readouterr().err


def test_config_file_is_used(project, capsys):
    config = project.root / "bpmn-inline.toml"
    config.write_text('[outputs]\nhtml = "public/index.html"\n', encoding="utf-8")
    assert main(["--root", str(project.root), "--config", str(config), "html"]) == 0
    assert (project.root / "public" / "index.html").is_file()


def test_relative_config_resolves_against_root(project, tmp_path, monkeypatch):
    (project.root / "bpmn-inline.toml").write_text('[outputs]\nhtml = "site/index.html"\n', encoding="utf-8")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    assert main(["--root", str(project.root), "--config", "bpmn-inline.toml", "html"]) == 0
    assert (project.root / "site" / "index.html").is_file()


def test_badly_typed_config_reports_and_fails(project, capsys):
    (project.root / "bpmn-inline.toml").write_text("placeholder = 3\n", encoding="utf-8")
    assert main(["--root", str(project.root), "--config", "bpmn-inline.toml", "html"]) == 1
    assert "placeholder must be a string" in capsys.readouterr().err
