# tests/test_options.py

"""Tests pour ocdopts/domain/options.py"""

import logging
from typing import get_args

import pytest

from ocdopts.domain.context import RecordingCommandContext
from ocdopts.domain.errors import EXIT_HELP, EXIT_SUCCESS, EXIT_USAGE, ExitRequest
from ocdopts.domain.options import (
    FLAG_TABLE,
    PIPE_COMMAND,
    ArgumentInterpreter,
    DeferredInstruction,
    ParseState,
    SideEffect,
    usage_text,
)
from ocdopts.domain.search_paths import SearchPathList


@pytest.fixture
def context():
    return RecordingCommandContext()


@pytest.fixture
def search_paths():
    return SearchPathList()


@pytest.fixture
def output():
    """Canal de sortie utilisateur capturé ligne par ligne."""
    return []


@pytest.fixture
def interpreter(context, search_paths, output):
    return ArgumentInterpreter(context, search_paths, output=output.append)


# =============================================================================
# Flags
# =============================================================================
class TestFlags:
    def test_no_args(self, interpreter, context, search_paths):
        """Sans arguments: état vide, rien exécuté."""
        state = interpreter.interpret([])

        assert state == ParseState()
        assert context.lines == []
        assert len(search_paths) == 0

    def test_file_is_queued_not_run(self, interpreter, context):
        """-f met en file 'script {path}' sans rien exécuter."""
        state = interpreter.interpret(["-f", "foo.cfg"])

        assert state.config_commands() == ["script {foo.cfg}"]
        assert context.config_commands == ["script {foo.cfg}"]
        assert context.lines == []

    def test_command_is_queued_verbatim(self, interpreter, context):
        """-c met en file le texte tel quel."""
        state = interpreter.interpret(["--command", "init; reset halt"])

        assert state.config_commands() == ["init; reset halt"]
        assert context.lines == []

    def test_debug_default_level(self, interpreter, context):
        """-d seul exécute 'debug_level 3'."""
        interpreter.interpret(["-d"])

        assert context.lines == ["debug_level 3"]

    def test_debug_explicit_level(self, interpreter, context):
        """-d 1 exécute 'debug_level 1'."""
        interpreter.interpret(["-d", "1"])

        assert context.lines == ["debug_level 1"]

    def test_log_output_runs_immediately(self, interpreter, context):
        """-l exécute 'log_output <path>' immédiatement."""
        state = interpreter.interpret(["-l", "ocd.log"])

        assert context.lines == ["log_output ocd.log"]
        assert state.immediate_commands() == ["log_output ocd.log"]
        assert state.config_commands() == []

    def test_search_registers_in_order(self, interpreter, search_paths):
        """Plusieurs -s gardent leur ordre relatif."""
        interpreter.interpret(["-s", "dirA", "-f", "x.cfg", "-s", "dirB"])

        assert list(search_paths) == ["dirA", "dirB"]
        assert search_paths.explicit == ["dirA", "dirB"]

    def test_search_registered_during_scan(self, search_paths, output):
        """-s est enregistré avant le traitement du flag suivant."""
        seen_at_run = []

        class Ctx(RecordingCommandContext):
            def run_line(self, text):
                seen_at_run.append(list(search_paths))
                return super().run_line(text)

        ArgumentInterpreter(Ctx(), search_paths, output=output.append).interpret(["-s", "first", "-d"])

        assert seen_at_run == [["first"]]

    def test_mixed_order_preserved(self, interpreter, context):
        """Les instructions suivent l'ordre de la ligne de commande."""
        state = interpreter.interpret(
            ["-l", "a.log", "-f", "board.cfg", "-d2", "-c", "init"]
        )

        assert state.instructions == [
            DeferredInstruction("log_output a.log", "run_immediately"),
            DeferredInstruction("script {board.cfg}", "queue_as_config"),
            DeferredInstruction("debug_level 2", "run_immediately"),
            DeferredInstruction("init", "queue_as_config"),
        ]
        assert context.lines == ["log_output a.log", "debug_level 2"]
        assert context.config_commands == ["script {board.cfg}", "init"]


# =============================================================================
# --pipe
# =============================================================================
class TestPipe:
    def test_pipe_runs_compound_command(self, interpreter, context):
        """-p exécute la commande composée."""
        interpreter.interpret(["-p"])

        assert context.lines == ["gdb_port pipe; log_output openocd.log"]

    def test_pipe_runs_then_warns_before_next_flag(self, search_paths, output, caplog):
        """-p: exécution, puis avertissement, puis seulement le flag suivant."""
        caplog.set_level(logging.WARNING)
        events = []

        def warnings_so_far():
            return len([r for r in caplog.records if r.levelno == logging.WARNING])

        class Ctx(RecordingCommandContext):
            def run_line(self, text):
                events.append((text, warnings_so_far()))
                return super().run_line(text)

        ArgumentInterpreter(Ctx(), search_paths, output=output.append).interpret(["-p", "-d", "0"])

        assert events == [(PIPE_COMMAND, 0), ("debug_level 0", 1)]
        assert "deprecated option: -p/--pipe" in caplog.text


# =============================================================================
# Help / version
# =============================================================================
class TestExitRequests:
    def test_help_prints_usage_and_fails(self, interpreter, output):
        """--help affiche l'aide et demande une sortie en échec."""
        with pytest.raises(ExitRequest) as excinfo:
            interpreter.interpret(["--help"])

        assert excinfo.value.status == EXIT_HELP
        assert excinfo.value.status != 0
        assert output == usage_text()

    def test_help_wins_over_version(self, interpreter, output):
        """--version --help: l'aide l'emporte."""
        with pytest.raises(ExitRequest) as excinfo:
            interpreter.interpret(["--version", "--help"])

        assert excinfo.value.status == EXIT_HELP
        assert output[0] == "Open On-Chip Debugger"

    def test_version_exits_success_silently(self, interpreter, output):
        """--version sort en succès sans rien afficher."""
        with pytest.raises(ExitRequest) as excinfo:
            interpreter.interpret(["-v"])

        assert excinfo.value.status == EXIT_SUCCESS
        assert output == []

    def test_help_still_runs_earlier_immediate_flags(self, interpreter, context):
        """Les commandes immédiates sont passées avant la résolution de l'aide."""
        with pytest.raises(ExitRequest):
            interpreter.interpret(["-d", "-h"])

        assert context.lines == ["debug_level 3"]

    def test_malformed_command_line(self, interpreter, caplog):
        """Un flag inconnu donne une sortie en échec avec le diagnostic."""
        with pytest.raises(ExitRequest) as excinfo:
            interpreter.interpret(["--nope"])

        assert excinfo.value.status == EXIT_USAGE
        assert "unrecognized arguments" in excinfo.value.message
        assert "unrecognized arguments" in caplog.text

    @pytest.mark.parametrize(
        "argv",
        [
            ["--bogus", "-p", "-s", "late", "-l", "x.log"],
            ["stray", "-l", "x.log"],
            ["-d", "-s", "early", "-c", "init", "--bogus"],
        ],
    )
    def test_malformed_command_line_has_no_side_effect(
        self, interpreter, context, search_paths, argv
    ):
        """Ligne invalide: rien n'est exécuté, mis en file ni enregistré."""
        with pytest.raises(ExitRequest) as excinfo:
            interpreter.interpret(argv)

        assert excinfo.value.status == EXIT_USAGE
        assert context.lines == []
        assert context.config_commands == []
        assert search_paths.explicit == []

    def test_state_not_shared_between_parses(self, interpreter):
        """Deux appels successifs ne partagent pas d'état."""
        with pytest.raises(ExitRequest):
            interpreter.interpret(["--help"])

        state = interpreter.interpret(["-c", "init"])

        assert state.help_requested is False
        assert state.config_commands() == ["init"]


# =============================================================================
# Values starting with '-'
# =============================================================================
class TestDashValues:
    def test_command_value_starting_with_dash(self, interpreter, context):
        """-c -x met '-x' en file tel quel."""
        state = interpreter.interpret(["-c", "-x"])

        assert state.config_commands() == ["-x"]
        assert context.lines == []

    def test_file_value_starting_with_dash(self, interpreter):
        """-f -board.cfg donne 'script {-board.cfg}'."""
        state = interpreter.interpret(["-f", "-board.cfg"])

        assert state.config_commands() == ["script {-board.cfg}"]

    def test_search_and_log_values_starting_with_dash(self, interpreter, context, search_paths):
        interpreter.interpret(["-s", "-scripts", "--log_output", "-out.log"])

        assert search_paths.explicit == ["-scripts"]
        assert context.lines == ["log_output -out.log"]


class TestUsageText:
    def test_header(self):
        lines = usage_text()

        assert lines[:2] == ["Open On-Chip Debugger", "Licensed under GNU GPL v2"]

    def test_one_line_per_flag(self):
        """Une ligne par flag, alignée comme l'ancienne aide."""
        lines = usage_text()[2:]

        assert len(lines) == len(FLAG_TABLE)
        assert lines[0] == "--help       | -h\tdisplay this help"
        assert "--log_output | -l\tredirect log output to file <name>" in lines
        assert any(line.startswith("--pipe") for line in lines)


class TestFlagTable:
    def test_every_side_effect_has_exactly_one_flag(self):
        """Chaque effet déclaré correspond à un flag de la table, et inversement."""
        effects = [spec.side_effect for spec in FLAG_TABLE]

        assert sorted(effects) == sorted(get_args(SideEffect))

    def test_every_flag_is_handled(self, interpreter):
        """Chaque flag de la table est accepté par l'interpréteur."""
        for spec in FLAG_TABLE:
            if spec.side_effect in ("help", "version"):
                continue
            argv = [f"--{spec.long_name}"]
            if spec.has_argument == "required":
                argv.append("value")
            interpreter.interpret(argv)
