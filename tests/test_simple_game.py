"""Tests for the command-line runner."""

from game_controls.simple_game import main, parse_arguments


class TestArguments:
    def test_play_defaults(self) -> None:
        args = parse_arguments(["play"])
        assert args.command == "play"
        assert args.agent == "reflex"
        assert args.layout == "smallClassic"
        assert args.depth is None

    def test_batch_accepts_several_agents(self) -> None:
        args = parse_arguments(["batch", "--agent", "reflex", "minimax", "--games", "3"])
        assert args.agent == ["reflex", "minimax"]
        assert args.games == 3


class TestMain:
    def test_search_command(self, capsys) -> None:
        assert main(["search", "--layout", "tinyMaze", "--algorithm", "bfs", "--verbosity", "0"]) == 0
        assert "BFS: path length" in capsys.readouterr().out

    def test_play_command(self, capsys) -> None:
        assert main(["play", "--layout", "testClassic", "--seed", "1", "--verbosity", "0"]) == 0
        assert "Final score" in capsys.readouterr().out

    def test_track_command(self) -> None:
        assert main(["track", "--layout", "smallClassic", "--tracker", "joint",
                     "--steps", "2", "--seed", "0", "--verbosity", "0"]) == 0

    def test_missing_layout_reports_error(self, capsys) -> None:
        assert main(["search", "--layout", "doesNotExist", "--verbosity", "0"]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_list_layouts(self, capsys) -> None:
        assert main(["--list-layouts"]) == 0
        assert "tinyMaze" in capsys.readouterr().out
