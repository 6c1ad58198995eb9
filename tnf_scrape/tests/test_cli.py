"""Tests for the command-line entry point."""

from unittest.mock import patch

from tnf_scrape.cli import get_product_id, main
from tnf_scrape.models import ProductMapped
from tnf_scrape.scraper import FetchError
from tnf_scrape.validation import ProductIdValidationError


def run(argv):
    return main(argv + ["--no-log-file"])


class TestGetProductId:
    def test_argument_used_without_prompt(self):
        with patch("builtins.input") as mock_input:
            assert get_product_id("  NF0A3C8D ") == "NF0A3C8D"
        mock_input.assert_not_called()

    def test_prompt_when_missing(self):
        with patch("builtins.input", return_value=" NF0A3C8D "):
            assert get_product_id(None) == "NF0A3C8D"

    def test_blank_prompt_aborts(self, capsys):
        with patch("builtins.input", return_value="   "):
            assert get_product_id(None) is None
        assert "No productId provided. Exiting." in capsys.readouterr().out

    def test_control_character_argument_aborts(self):
        with patch("builtins.input") as mock_input:
            assert get_product_id("\x07\x1b") is None
        mock_input.assert_not_called()

    def test_eof_aborts(self):
        with patch("builtins.input", side_effect=EOFError):
            assert get_product_id("") is None


class TestMain:
    def test_writes_output_file(self, tmp_path, capsys):
        records = [ProductMapped(sku="NF0A3C8D$color=RED")]
        with patch("tnf_scrape.cli.scrape_product", return_value=records) as mock_scrape:
            code = run(["NF0A3C8D", "--output-dir", str(tmp_path)])

        assert code == 0
        mock_scrape.assert_called_once_with("NF0A3C8D")
        assert (tmp_path / "NF0A3C8D.json").exists()
        assert "Output saved to file:" in capsys.readouterr().out

    def test_blank_prompt_exits_silently(self, tmp_path):
        with patch("builtins.input", return_value=""), \
                patch("tnf_scrape.cli.scrape_product") as mock_scrape:
            code = run(["--output-dir", str(tmp_path)])

        assert code == 0
        mock_scrape.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_failed_fetch_writes_nothing(self, tmp_path):
        with patch("tnf_scrape.cli.scrape_product", return_value=None):
            code = run(["NF0A3C8D", "--output-dir", str(tmp_path)])

        assert code == 0
        assert list(tmp_path.iterdir()) == []

    def test_fetch_error_exit_code(self, tmp_path):
        with patch("tnf_scrape.cli.scrape_product", side_effect=FetchError("down")):
            assert run(["NF0A3C8D", "--output-dir", str(tmp_path)]) == 1

    def test_invalid_id_exit_code(self, tmp_path):
        with patch("tnf_scrape.cli.scrape_product", side_effect=ProductIdValidationError("bad")):
            assert run(["bad/id", "--output-dir", str(tmp_path)]) == 1

    def test_interrupt_exit_code(self, tmp_path):
        with patch("tnf_scrape.cli.scrape_product", side_effect=KeyboardInterrupt):
            assert run(["NF0A3C8D", "--output-dir", str(tmp_path)]) == 130

    def test_control_character_argument_exits_silently(self, tmp_path):
        with patch("tnf_scrape.cli.scrape_product") as mock_scrape:
            code = run(["\x07", "--output-dir", str(tmp_path)])

        assert code == 0
        mock_scrape.assert_not_called()
        assert list(tmp_path.iterdir()) == []
