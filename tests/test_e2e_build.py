"""
End-to-end build tests

Tests the full pipeline: source document -> env_check -> source_parse ->
document_write, and validates the rewritten HTML and the YAML build manifest.
"""

import pytest
import yaml

from htmlblocks.__main__ import env_check, source_parse, document_write, results_report
from htmlblocks.models import ProgramState, pipeline


TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <!--build:less css/site.css-->
    <link rel="stylesheet/less" type="text/css" href="css/site.less">
    <!--endbuild-->
    <!--build:uncomment-->
    <!--<meta name="env" content="production">-->
    <!--endbuild-->
</head>
<body>
    <!--build:js js/app.min.js-->
    <script src="js/a.js"></script>
    <script src="js/b.js"></script>
    <!--endbuild-->
    <!--build:requirejs js/main js/main.min.js release/-->
</body>
</html>
"""

EXPECTED = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "<head>\n"
    '    <link rel="stylesheet" type="text/css" href="css/site.css">\n'
    "    \n"
    '    <meta name="env" content="production">\n'
    "    \n"
    "</head>\n"
    "<body>\n"
    '    <script src="js/app.min.js"></script>\n'
    '    <script src="js/main.min.js"></script>\n'
    "</body>\n"
    "</html>\n"
)


@pytest.fixture
def project(tmp_path):
    """Source tree with a template and its assets"""
    src = tmp_path / "src"
    (src / "js").mkdir(parents=True)
    (src / "css").mkdir()
    (src / "js" / "a.js").write_text("var a;")
    (src / "js" / "b.js").write_text("var b;")
    (src / "css" / "site.less").write_text("body { color: red; }")
    (src / "index.html").write_text(TEMPLATE)
    return tmp_path


def build(project, **options):
    state = ProgramState(
        inputdir=project / "src",
        outputdir=project / "dist",
        inputFile="index.html",
        verbosity=0,
        **options,
    )
    return pipeline(state, env_check, source_parse, document_write, results_report)


class TestDocumentBuild:
    """Test the rewritten document"""

    def test_document_rewritten(self, project):
        state = build(project)

        assert state.envOK is True
        assert (project / "dist" / "index.html").read_text() == EXPECTED
        assert state.diagnostics == []

    def test_write_result(self, project):
        state = build(project)

        assert state.writeResult["status"] is True
        assert state.writeResult["instruction_count"] == 5
        assert state.writeResult["skipped_count"] == 0

    def test_output_file_name(self, project):
        build(project, outputFile="pages/home.html")
        assert (project / "dist" / "pages" / "home.html").is_file()

    def test_custom_tag_name(self, project):
        (project / "src" / "index.html").write_text(
            '<!--prod:js app.js--><script src="js/a.js"></script><!--endprod-->'
            '<!--build:js other.js--><script src="js/b.js"></script><!--endbuild-->'
        )
        build(project, tagName="prod")

        assert (project / "dist" / "index.html").read_text() == (
            '<script src="app.js"></script>'
            '<!--build:js other.js--><script src="js/b.js"></script><!--endbuild-->'
        )

    def test_skipped_tags_counted(self, project):
        (project / "src" / "index.html").write_text(
            '<!--build:js app.js--><script src="js/gone.js"></script><!--endbuild-->'
        )
        state = build(project)

        assert state.writeResult["skipped_count"] == 1
        assert state.writeResult["instruction_count"] == 0


class TestManifest:
    """Test the YAML build manifest"""

    def test_manifest_grouped_by_tool_and_target(self, project):
        build(project)
        dist = project / "dist"
        manifest = yaml.safe_load((dist / "build-manifest.yaml").read_text())

        assert manifest["source"] == "index.html"
        assert manifest["output"] == "index.html"

        instructions = manifest["instructions"]
        assert instructions["less"]["dist"] == [
            {"src": "css/site.less", "dest": str(dist / "css" / "site.css")},
        ]
        assert instructions["uglify"]["dist"] == [
            {"src": "js/a.js", "dest": str(dist / "js" / "app.min.js")},
            {"src": "js/b.js", "dest": str(dist / "js" / "app.min.js")},
        ]
        assert instructions["uglify"]["release"] == [
            {"src": str(dist / "js" / "main.min.js"), "dest": str(dist / "js" / "main.min.js")},
        ]

        options = instructions["requirejs"]["release"][0]["options"]
        assert options == {
            "baseUrl": "js",
            "name": "main",
            "out": str(dist / "js" / "main.min.js"),
            "mainConfigFile": "js/main.js",
        }

    def test_base_url_and_target_overrides(self, project):
        build(project, baseUrl="/srv/www", target="staging")
        manifest = yaml.safe_load((project / "dist" / "build-manifest.yaml").read_text())

        assert manifest["instructions"]["uglify"]["staging"][0]["dest"] == "/srv/www/js/app.min.js"
        assert "release" in manifest["instructions"]["requirejs"]


class TestPipelineFailures:
    """Test stages that abort the run"""

    def test_missing_input_file(self, tmp_path):
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path / "dist", inputFile="nope.html")
        with pytest.raises(SystemExit) as e:
            env_check(state)
        assert e.value.code == 1

    def test_unclosed_block(self, project):
        (project / "src" / "index.html").write_text("<!--build:js app.js-->never closed")
        with pytest.raises(SystemExit) as e:
            build(project)
        assert e.value.code == 1
        assert not (project / "dist" / "index.html").exists()

    def test_strict_mode(self, project):
        """Strict mode turns a skipped tag into a failed run"""
        (project / "src" / "index.html").write_text(
            '<!--build:js app.js--><script src="js/gone.js"></script><!--endbuild-->'
        )
        with pytest.raises(SystemExit):
            build(project, strict=True)

    def test_write_without_parse(self, tmp_path):
        with pytest.raises(SystemExit):
            document_write(ProgramState())
