# tests/controllers/test_sanitize_controller.py
import pytest
from bs4 import BeautifulSoup

from amp_sanitizer.controllers.sanitize_controller import SanitizeController
from amp_sanitizer.dom.document import AmpDocument
from amp_sanitizer.model import SanitizerSettings
from amp_sanitizer.sanitizers.base import BaseSanitizer
from amp_sanitizer.sanitizers.meta_sanitizer import MetaNormalizer
from amp_sanitizer.sanitizers.registry import SanitizerRegistry

PAGE = '<html><head><meta name="viewport" content="initial-scale = 1"></head><body></body></html>'


class RecordingSanitizer(BaseSanitizer):
    """Nep-sanitizer die bijhoudt welke documenten hij heeft gezien."""

    def __init__(self):
        self.seen = []

    def sanitize(self, document):
        self.seen.append(document)


@pytest.fixture
def controller():
    """Een controller met de standaard pipeline (alleen 'meta')."""
    return SanitizeController(SanitizerSettings())


def test_registry_discovers_meta_sanitizer():
    """De registry vindt de meta sanitizer via auto-discovery."""
    SanitizerRegistry.discover()
    assert "meta" in SanitizerRegistry.names()
    assert isinstance(SanitizerRegistry.get("meta").build(SanitizerSettings()), MetaNormalizer)


def test_default_pipeline_contains_meta_normalizer(controller):
    assert len(controller.sanitizers) == 1
    assert isinstance(controller.sanitizers[0], MetaNormalizer)


def test_unknown_sanitizer_is_skipped():
    """Onbekende namen in 'enabled' worden overgeslagen."""
    controller = SanitizeController(SanitizerSettings(enabled=["bestaat_niet", "meta"]))
    assert [type(s) for s in controller.sanitizers] == [MetaNormalizer]


def test_settings_are_passed_to_the_normalizer():
    """Encoding en standaard viewport komen uit de instellingen."""
    settings = SanitizerSettings(encoding="iso-8859-1", default_viewport="width=device-width,initial-scale=1")
    html = SanitizeController(settings).sanitize_html("<head></head>")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("meta", charset=True)["charset"] == "iso-8859-1"
    assert soup.find("meta", attrs={"name": "viewport"})["content"] == "width=device-width,initial-scale=1"


def test_custom_pipeline_runs_every_sanitizer_in_order():
    first, second = RecordingSanitizer(), RecordingSanitizer()
    doc = AmpDocument.from_html("<head></head>")
    result = SanitizeController(sanitizers=[first, second]).sanitize_document(doc)
    assert result is doc
    assert first.seen == [doc]
    assert second.seen == [doc]


def test_sanitize_html(controller):
    """sanitize_html levert een HTML string met de vereiste markup."""
    soup = BeautifulSoup(controller.sanitize_html(PAGE), "html.parser")
    assert soup.head.find("meta")["charset"] == "utf-8"
    assert soup.find("meta", attrs={"name": "viewport"})["content"] == "initial-scale=1,width=device-width"
    assert soup.head.find("style", attrs={"amp-boilerplate": True}) is not None


def test_sanitize_file_in_place(controller, tmp_path):
    """Zonder output pad wordt het bestand zelf herschreven."""
    page = tmp_path / "index.html"
    page.write_text(PAGE, encoding="utf-8")

    target = controller.sanitize_file(page)

    assert target == page
    assert "amp-boilerplate" in page.read_text(encoding="utf-8")


def test_run_writes_to_output_dir(controller, tmp_path):
    """run() schrijft gesaneerde kopieën naar de output map."""
    src = tmp_path / "src"
    src.mkdir()
    pages = []
    for name in ("a.html", "b.html"):
        path = src / name
        path.write_text(PAGE, encoding="utf-8")
        pages.append(path)

    out = tmp_path / "out"
    report = controller.run(pages, output_dir=out, show_progress=False)

    assert report.ok
    assert sorted(report.processed) == [str(out / "a.html"), str(out / "b.html")]
    assert "amp-boilerplate" in (out / "a.html").read_text(encoding="utf-8")
    # Het origineel blijft ongewijzigd
    assert (src / "a.html").read_text(encoding="utf-8") == PAGE


def test_run_keeps_relative_layout_for_same_file_names(controller, tmp_path):
    """Bestanden met dezelfde naam in verschillende mappen overschrijven elkaar niet."""
    sources = []
    for folder in ("a", "b"):
        (tmp_path / "site" / folder).mkdir(parents=True)
        path = tmp_path / "site" / folder / "index.html"
        path.write_text(PAGE, encoding="utf-8")
        sources.append(path)

    out = tmp_path / "out"
    report = controller.run(sources, output_dir=out, show_progress=False)

    assert report.ok
    assert report.processed == [str(out / "a" / "index.html"), str(out / "b" / "index.html")]
    assert len(set(report.processed)) == 2
    assert (out / "a" / "index.html").exists()
    assert (out / "b" / "index.html").exists()


def test_run_reports_duplicate_input_as_failed(controller, tmp_path):
    """Hetzelfde bestand twee keer opgeven schrijft één kopie en meldt de tweede."""
    page = tmp_path / "index.html"
    page.write_text(PAGE, encoding="utf-8")

    out = tmp_path / "out"
    report = controller.run([page, page], output_dir=out, show_progress=False)

    assert report.processed == [str(out / "index.html")]
    assert report.failed == [str(page)]


def test_run_continues_after_failure(controller, tmp_path):
    """Een onleesbaar bestand wordt gerapporteerd; de rest gaat door."""
    good = tmp_path / "good.html"
    good.write_text(PAGE, encoding="utf-8")
    missing = tmp_path / "missing.html"

    report = controller.run([missing, good], in_place=True, show_progress=False)

    assert not report.ok
    assert report.failed == [str(missing)]
    assert report.processed == [str(good)]


def test_run_requires_a_target(controller, tmp_path):
    """Zonder output map en zonder in_place is run() ongeldig."""
    with pytest.raises(ValueError):
        controller.run([tmp_path / "x.html"])
