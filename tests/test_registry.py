"""Tests for the slash-command registry."""

from donutcli.commands import CommandDescriptor, CommandHandler, CommandRegistry, CommandResult


class EchoCommand(CommandHandler):
    async def execute(self, args):
        return CommandResult.info(args)


class TestRegistryLookup:

    def test_builtin_commands_registered_once(self, registry):
        names = [d.name for d in registry.list_unique()]
        assert names == [
            "strategy", "backtest", "analyze", "paper", "status",
            "sessions", "resume", "help", "clear", "quit",
        ]
        assert len(registry) == 10

    def test_alias_resolves_to_same_descriptor(self, registry):
        assert registry.lookup("bt") is registry.lookup("backtest")
        assert registry.lookup("?") is registry.lookup("help")
        assert registry.lookup("exit") is registry.lookup("quit")

    def test_lookup_is_case_insensitive(self, registry):
        assert registry.lookup("STRAT").name == "strategy"
        assert "HeLp" in registry

    def test_unknown_name(self, registry):
        assert registry.lookup("moon") is None
        assert "moon" not in registry

    def test_mixed_case_registration(self):
        registry = CommandRegistry()
        registry.register(CommandDescriptor("Echo", "Echo args", EchoCommand(), ("E",)))
        assert registry.lookup("echo") is registry.lookup("e")
        assert registry.lookup("ECHO").name == "Echo"

    def test_later_registration_wins(self, registry):
        replacement = CommandDescriptor("scan", "Scan markets", EchoCommand(), ("s",))
        registry.register(replacement)

        assert registry.lookup("s") is replacement
        # the old descriptor is still reachable through its other keys
        assert registry.lookup("strategy").name == "strategy"
        assert len(registry) == 11

    def test_iteration_matches_list_unique(self, registry):
        assert list(registry) == registry.list_unique()


class TestCompletionAndSuggestions:

    def test_complete_prefix(self, registry):
        assert registry.complete("/st") == ["/status", "/strat", "/strategy"]

    def test_complete_without_slash(self, registry):
        assert registry.complete("q") == ["/q", "/quit"]

    def test_complete_no_match(self, registry):
        assert registry.complete("/zzz") == []

    def test_suggest_close_name(self, registry):
        assert registry.suggest("quti")[0] == "quit"

    def test_suggest_maps_aliases_to_canonical_names(self, registry):
        suggestions = registry.suggest("stat")
        assert "status" in suggestions or "strategy" in suggestions
        assert "strat" not in suggestions

    def test_suggest_nothing_close(self, registry):
        assert registry.suggest("xyzzy") == []
