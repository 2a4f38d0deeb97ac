# tests/test_main.py

"""Tests for command-line parsing and routing in main."""

import unittest
from unittest.mock import MagicMock, patch

import main


class TestParser(unittest.TestCase):
    """Argument parsing."""

    def test_defaults(self) -> None:
        args = main._build_parser().parse_args([])
        self.assertIsNone(args.query)
        self.assertEqual(args.category, "all")
        self.assertEqual(args.price_range, "all")
        self.assertEqual(args.sort, "default")
        self.assertEqual(args.output_format, "json")

    def test_browse_options(self) -> None:
        args = main._build_parser().parse_args(
            ["roses", "-c", "fleurs", "-p", "mid", "--sort", "price_asc"]
        )
        self.assertEqual(args.query, "roses")
        self.assertEqual(args.category, "fleurs")
        self.assertEqual(args.price_range, "mid")
        self.assertTrue(main._wants_browse(args))

    def test_unknown_category_rejected(self) -> None:
        with patch("sys.stderr"), self.assertRaises(SystemExit):
            main._build_parser().parse_args(["-c", "bijoux"])

    def test_no_options_is_not_browse(self) -> None:
        args = main._build_parser().parse_args([])
        self.assertFalse(main._wants_browse(args))


class TestRouting(unittest.TestCase):
    """main() picks the TUI or a headless command."""

    @patch("main.setup_logging")
    @patch("main._run_tui")
    def test_no_args_launches_tui(
        self, mock_tui: MagicMock, mock_logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["sweetbloom"]):
            main.main()
        mock_tui.assert_called_once()
        mock_logging.assert_called_once_with(headless=False)

    @patch("main.setup_logging")
    @patch("main._run_cli", return_value=0)
    def test_health_exits_with_cli_code(
        self, mock_cli: MagicMock, mock_logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["sweetbloom", "--health"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 0)
        self.assertTrue(mock_cli.call_args.args[0].health)
        mock_logging.assert_called_once_with(headless=True)

    @patch("main.setup_logging")
    @patch("main._run_cli", return_value=1)
    def test_query_routes_to_cli(
        self, mock_cli: MagicMock, mock_logging: MagicMock,
    ) -> None:
        with patch("sys.argv", ["sweetbloom", "choc"]):
            with self.assertRaises(SystemExit) as ctx:
                main.main()
        self.assertEqual(ctx.exception.code, 1)
        self.assertEqual(mock_cli.call_args.args[0].query, "choc")
