# ABOUTME: Tests for the line-oriented TOML section reader and section removal
# ABOUTME: Exercises state transitions and flush points of SectionParser
import pytest

from mcpswitch.utils.toml_sections import (
    ParserState,
    SectionParser,
    parse_array,
    parse_string,
    parse_table_header,
    remove_sections,
    split_table_name,
)


def parse(content: str):
    return SectionParser("mcp_servers").parse(content)


class TestParseValues:
    """Tests for value helpers."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"npx"', "npx"),
            ('"say \\"hi\\""', 'say "hi"'),
            ('"C:\\\\tools"', "C:\\tools"),
            ("'literal \\n'", "literal \\n"),
            ('"npx" # comment', "npx"),
            ("bare # comment", "bare"),
            ("42", "42"),
        ],
    )
    def test_parse_string(self, raw, expected):
        assert parse_string(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('["-y", "pkg"]', ["-y", "pkg"]),
            ("[]", []),
            ('[ "a" , "" , "b" ]', ["a", "b"]),
            ('["a,b", "c"]', ["a,b", "c"]),
            ("['x', 'y']", ["x", "y"]),
            ('["a"] # trailing', ["a"]),
            ('"not an array"', []),
            ('["unterminated"', []),
        ],
    )
    def test_parse_array(self, raw, expected):
        assert parse_array(raw) == expected

    def test_parse_table_header(self):
        assert parse_table_header("[mcp_servers.x]") == "mcp_servers.x"
        assert parse_table_header("  [ mcp_servers.x ]  # note") == "mcp_servers.x"
        assert parse_table_header("[[profiles]]") == "[[profiles]]"
        assert parse_table_header('args = ["a"]') is None

    def test_split_table_name(self):
        assert split_table_name("mcp_servers.x", "mcp_servers") == ("x", None)
        assert split_table_name("mcp_servers.x.env", "mcp_servers") == ("x", "env")
        assert split_table_name("mcp_servers.'x y'.env", "mcp_servers") == ("x y", "env")
        assert split_table_name("mcp_servers", "mcp_servers") is None
        assert split_table_name("[[mcp_servers.x]]", "mcp_servers") is None


class TestSectionParser:
    """Tests for SectionParser state machine."""

    def test_stdio_section_with_env_subsection(self):
        sections = parse(
            '[mcp_servers.github]\n'
            'type = "stdio"\n'
            'command = "npx"\n'
            'args = ["-y", "@modelcontextprotocol/server-github"]\n'
            '[mcp_servers.github.env]\n'
            'GITHUB_TOKEN = "ghp_xxxx"\n'
        )

        assert len(sections) == 1
        section = sections[0]
        assert section.name == "github"
        assert section.type == "stdio"
        assert section.command == "npx"
        assert section.args == ["-y", "@modelcontextprotocol/server-github"]
        assert section.env == {"GITHUB_TOKEN": "ghp_xxxx"}

    def test_type_defaults_to_stdio(self):
        sections = parse('[mcp_servers.a]\ncommand = "echo"\n')

        assert sections[0].type == "stdio"

    def test_new_server_header_flushes_previous(self):
        sections = parse(
            '[mcp_servers.a]\ncommand = "a"\n'
            '[mcp_servers.b]\ntype = "sse"\nurl = "https://x.dev/sse"\n'
        )

        assert [(s.name, s.command, s.url) for s in sections] == [
            ("a", "a", None),
            ("b", None, "https://x.dev/sse"),
        ]

    def test_unrelated_header_flushes_and_ignores_keys(self):
        sections = parse(
            '[mcp_servers.a]\ncommand = "a"\n'
            '[model_providers.openai]\ncommand = "not-a-server"\n'
        )

        assert len(sections) == 1
        assert sections[0].command == "a"

    def test_keys_outside_sections_ignored(self):
        sections = parse('model = "o3"\ncommand = "x"\n')

        assert sections == []

    def test_comments_and_blank_lines_ignored(self):
        sections = parse(
            "# >>> mcpswitch:mcp:start\n\n"
            '[mcp_servers.a]\n# comment\ncommand = "a"\n\n'
            "# <<< mcpswitch:mcp:end\n"
        )

        assert sections[0].command == "a"

    def test_env_subsection_returns_to_section(self):
        """Keys after re-opening the base table go back to the section."""
        sections = parse(
            '[mcp_servers.a.env]\nK = "v"\n'
            '[mcp_servers.a]\ncommand = "a"\n'
        )

        assert len(sections) == 1
        assert sections[0].env == {"K": "v"}
        assert sections[0].command == "a"

    def test_env_keys_do_not_set_command(self):
        sections = parse('[mcp_servers.a.env]\ncommand = "oops"\n')

        assert sections[0].command is None
        assert sections[0].env == {"command": "oops"}

    def test_inline_env_table(self):
        sections = parse('[mcp_servers.a]\ncommand = "a"\nenv = { TOKEN = "t", PORT = 8080 }\n')

        assert sections[0].env == {"TOKEN": "t", "PORT": "8080"}

    def test_other_subtable_keys_ignored(self):
        sections = parse(
            '[mcp_servers.a]\ncommand = "a"\n'
            '[mcp_servers.a.tools]\ncommand = "b"\n'
        )

        assert len(sections) == 1
        assert sections[0].command == "a"

    def test_quoted_name(self):
        sections = parse('[mcp_servers."my server"]\ncommand = "a"\n')

        assert sections[0].name == "my server"

    def test_state_transitions(self):
        parser = SectionParser("mcp_servers")
        assert parser.state is ParserState.OUTSIDE_SECTION

        parser.feed("[mcp_servers.a]")
        assert parser.state is ParserState.IN_SECTION

        parser.feed("[mcp_servers.a.env]")
        assert parser.state is ParserState.IN_ENV_SUBSECTION

        parser.feed("[mcp_servers.a.tools]")
        assert parser.state is ParserState.IN_OTHER_SUBSECTION

        parser.feed("[other]")
        assert parser.state is ParserState.OUTSIDE_SECTION
        assert [s.name for s in parser.sections] == ["a"]

        assert parser.finish() == parser.sections

    def test_key_without_open_section_ignored(self):
        parser = SectionParser("mcp_servers")
        parser.state = ParserState.IN_SECTION

        parser.feed('command = "x"')

        assert parser.finish() == []

    def test_end_of_input_flushes(self):
        parser = SectionParser("mcp_servers")
        parser.feed("[mcp_servers.a]")
        parser.feed('url = "https://x.dev"')

        assert parser.sections == []
        assert [s.url for s in parser.finish()] == ["https://x.dev"]


class TestRemoveSections:
    """Tests for remove_sections function."""

    CONTENT = (
        'model = "o3"\n'
        "\n"
        "[mcp_servers.github]\n"
        'command = "npx"\n'
        "[mcp_servers.github.env]\n"
        'TOKEN = "x"\n'
        "\n"
        "[mcp_servers.keep]\n"
        'command = "keep"\n'
        "\n"
        "[profiles.fast]\n"
        'model = "mini"\n'
    )

    def test_removes_named_sections_and_env(self):
        result = remove_sections(self.CONTENT, "mcp_servers", ["github"])

        assert result == (
            'model = "o3"\n'
            "\n"
            "[mcp_servers.keep]\n"
            'command = "keep"\n'
            "\n"
            "[profiles.fast]\n"
            'model = "mini"\n'
        )

    def test_removes_quoted_names(self):
        content = "[mcp_servers.'github']\ncommand = \"a\"\n[mcp_servers.\"github\".env]\nK = \"v\"\n[x]\n"

        assert remove_sections(content, "mcp_servers", {"github"}) == "[x]\n"

    def test_no_names_returns_content_unchanged(self):
        assert remove_sections(self.CONTENT, "mcp_servers", []) == self.CONTENT

    def test_keeps_unmatched_content_byte_for_byte(self):
        content = "a = 1\r\n[mcp_servers.other]\r\ncommand = \"x\"\r\n"

        assert remove_sections(content, "mcp_servers", ["github"]) == content

    def test_keeps_other_subtables(self):
        content = "[mcp_servers.github.tools]\nx = 1\n"

        assert remove_sections(content, "mcp_servers", ["github"]) == content
