"""
Tests for observe operations — invoker, search, list, upgradable, sources.
"""

import pytest

from wingetkit.adapters.winget import WingetAdapter
from wingetkit.core.errors import ExternalToolError, UnrecognizedOutputError
from wingetkit.core.models.package import PackageRecord, SourceRecord
from wingetkit.core.models.query import PackageQuery
from wingetkit.core.models.settings import Settings
from wingetkit.core.services.winget_ops import (
    find_packages,
    get_adapter,
    get_packages,
    get_upgradable,
    list_sources,
    list_sources_table,
    package_list,
    package_search,
    package_upgradable,
    run_winget,
    run_winget_structured,
    source_list,
)


# ── Invoker ─────────────────────────────────────────────────────────


class TestRunWinget:
    def test_returns_lines(self, mock_adapter):
        mock_adapter.set_output("search", "a\nb\r\nc")
        assert run_winget(["search", "x"], mock_adapter) == ["a", "b", "c"]

    def test_normalizes_marker(self, mock_adapter):
        mock_adapter.set_output("list", "Microsoft.Edgeâ€¦ 1.0")
        assert run_winget(["list"], mock_adapter) == ["Microsoft.Edge… 1.0"]

    def test_passes_args_through(self, mock_adapter):
        run_winget(["search", "--id", "Git.Git"], mock_adapter)
        assert mock_adapter.call_log[0].args == ["search", "--id", "Git.Git"]
        assert mock_adapter.call_log[0].structured is False

    def test_failure_raises(self, mock_adapter):
        mock_adapter.set_failure("search", error="boom", return_code=2)
        with pytest.raises(ExternalToolError) as exc_info:
            run_winget(["search"], mock_adapter)
        assert exc_info.value.return_code == 2
        assert "boom" in str(exc_info.value)

    def test_unavailable_tool_raises(self):
        from wingetkit.adapters.mock import MockAdapter

        with pytest.raises(ExternalToolError):
            run_winget(["search"], MockAdapter(available=False))


class TestRunWingetStructured:
    def test_json_lines(self, mock_adapter, read_fixture):
        mock_adapter.set_output("source", read_fixture("source_export.jsonl"))
        entries = run_winget_structured(["source", "export"], mock_adapter)
        assert [e["Name"] for e in entries] == ["winget", "msstore"]
        assert mock_adapter.call_log[0].structured is True

    def test_json_array(self, mock_adapter):
        mock_adapter.set_output("source", '[{"Name": "a"}, {"Name": "b"}]')
        assert run_winget_structured(["source", "export"], mock_adapter) == [
            {"Name": "a"},
            {"Name": "b"},
        ]

    def test_single_object(self, mock_adapter):
        mock_adapter.set_output("source", '{"Name": "a"}')
        assert run_winget_structured(["source", "export"], mock_adapter) == [{"Name": "a"}]

    def test_empty_output(self, mock_adapter):
        mock_adapter.set_output("source", "\n")
        assert run_winget_structured(["source", "export"], mock_adapter) == []

    def test_non_json_raises(self, mock_adapter):
        mock_adapter.set_output("source", "Name  Argument\n----")
        with pytest.raises(UnrecognizedOutputError):
            run_winget_structured(["source", "export"], mock_adapter)

    def test_non_object_raises(self, mock_adapter):
        mock_adapter.set_output("source", "[1, 2]")
        with pytest.raises(UnrecognizedOutputError):
            run_winget_structured(["source", "export"], mock_adapter)


# ── Packages ────────────────────────────────────────────────────────


class TestFindPackages:
    def test_search_records(self, mock_adapter, read_fixture):
        mock_adapter.set_output("search", read_fixture("search_vscode.txt"))
        records = find_packages(PackageQuery(query="vscode"), adapter=mock_adapter)

        assert len(records) == 3
        assert records[0] == PackageRecord(
            name="Visual Studio Code",
            id="Microsoft.VisualStudioCode",
            version="1.87.2",
            source="winget",
        )
        assert records[1].id == "Microsoft.VisualStudioCode.Ins…"
        assert all(r.available_version is None for r in records)
        assert mock_adapter.call_log[0].args == ["search", "vscode"]

    def test_no_results(self, mock_adapter, read_fixture):
        mock_adapter.set_output("search", read_fixture("no_results.txt"))
        assert find_packages(PackageQuery(id="Nope"), adapter=mock_adapter) == []

    def test_unrecognized_output_propagates(self, mock_adapter):
        mock_adapter.set_output("search", "Failed in attempting to update the source: winget")
        with pytest.raises(UnrecognizedOutputError):
            find_packages(PackageQuery(query="x"), adapter=mock_adapter)


class TestGetPackages:
    def test_list_records(self, mock_adapter, read_fixture):
        mock_adapter.set_output("list", read_fixture("list_installed.txt"))
        records = get_packages(PackageQuery(), adapter=mock_adapter)

        assert [r.id for r in records] == [
            "7zip.7zip",
            "Git.Git",
            "Microsoft.EdgeWebView2Runtime",
            "ARP\\Machine\\X64\\ContosoTool",
        ]
        assert records[0].available_version == "24.07"
        assert records[2].name == "Microsoft Edge WebView2 Run…"
        assert records[3].source is None

    def test_nothing_installed(self, mock_adapter, read_fixture):
        mock_adapter.set_output("list", read_fixture("no_installed.txt"))
        assert get_packages(PackageQuery(id="Nope"), adapter=mock_adapter) == []


class TestGetUpgradable:
    def test_footer_is_dropped(self, mock_adapter, read_fixture):
        mock_adapter.set_output("upgrade", read_fixture("upgrade_available.txt"))
        records = get_upgradable(PackageQuery(), adapter=mock_adapter)
        assert [r.id for r in records] == ["7zip.7zip", "Mozilla.Firefox"]
        assert records[1].available_version == "124.0.1"

    def test_nothing_to_upgrade(self, mock_adapter, read_fixture):
        mock_adapter.set_output("upgrade", read_fixture("no_installed.txt"))
        assert get_upgradable(PackageQuery(), adapter=mock_adapter) == []

    def test_no_applicable_upgrade(self, mock_adapter, read_fixture):
        mock_adapter.set_output("upgrade", read_fixture("no_upgrade.txt"))
        assert get_upgradable(PackageQuery(id="Git.Git"), adapter=mock_adapter) == []

    def test_pin_footer_is_dropped(self, mock_adapter, read_fixture):
        output = read_fixture("upgrade_available.txt") + (
            "1 package(s) have pins that prevent upgrade. "
            "Use the 'winget pin' command to view and edit pins.\n"
        )
        mock_adapter.set_output("upgrade", output)
        records = get_upgradable(PackageQuery(), adapter=mock_adapter)
        assert [r.id for r in records] == ["7zip.7zip", "Mozilla.Firefox"]

    def test_numeric_package_name_is_kept(self, mock_adapter):
        mock_adapter.set_output("upgrade", (
            "Name                 Id              Version Available Source\n"
            "-------------------------------------------------------------\n"
            "7 packages Toolkit   Seven.Toolkit   1.0     1.1       winget\n"
            "1 upgrades available.\n"
        ))
        records = get_upgradable(PackageQuery(), adapter=mock_adapter)
        assert [r.name for r in records] == ["7 packages Toolkit"]


# ── Sources ─────────────────────────────────────────────────────────


class TestSources:
    def test_list_sources_from_export(self, mock_adapter, read_fixture):
        mock_adapter.set_output("source", read_fixture("source_export.jsonl"))
        sources = list_sources(adapter=mock_adapter)

        assert sources[0] == SourceRecord(
            name="winget",
            argument="https://cdn.winget.microsoft.com/cache",
            data="Microsoft.Winget.Source_8wekyb3d8bbwe",
            identifier="Microsoft.Winget.Source_8wekyb3d8bbwe",
            type="Microsoft.PreIndexed.Package",
        )
        assert sources[1].name == "msstore"
        assert sources[1].data is None
        assert mock_adapter.call_log[0].args == ["source", "export"]

    def test_list_sources_from_table(self, mock_adapter, read_fixture):
        mock_adapter.set_output("source", read_fixture("source_list.txt"))
        sources = list_sources_table(adapter=mock_adapter)
        assert [(s.name, s.argument) for s in sources] == [
            ("winget", "https://cdn.winget.microsoft.com/cache"),
            ("msstore", "https://storeedgefd.dsx.mp.microsoft.com/v9.0"),
        ]
        assert sources[0].type is None


# ── Dict wrappers ───────────────────────────────────────────────────


class TestResultWrappers:
    def test_package_search_ok(self, mock_adapter, read_fixture):
        mock_adapter.set_output("search", read_fixture("search_vscode.txt"))
        result = package_search(PackageQuery(query="vscode"), adapter=mock_adapter)
        assert result["ok"] is True
        assert result["count"] == 3
        assert result["packages"][0]["id"] == "Microsoft.VisualStudioCode"

    def test_package_search_tool_failure(self, mock_adapter):
        mock_adapter.set_failure("search", error="winget crashed")
        result = package_search(PackageQuery(query="x"), adapter=mock_adapter)
        assert result == {"error": "winget crashed", "reason": "tool_failed"}

    def test_package_list_unrecognized(self, mock_adapter):
        mock_adapter.set_output("list", "???")
        result = package_list(PackageQuery(), adapter=mock_adapter)
        assert result["reason"] == "unrecognized_output"

    def test_package_list_nothing_installed(self, mock_adapter, read_fixture):
        mock_adapter.set_output("list", read_fixture("no_installed.txt"))
        result = package_list(PackageQuery(id="Nope"), adapter=mock_adapter)
        assert result == {"ok": True, "packages": [], "count": 0}

    def test_package_upgradable_empty(self, mock_adapter, read_fixture):
        mock_adapter.set_output("upgrade", read_fixture("no_results.txt"))
        result = package_upgradable(PackageQuery(), adapter=mock_adapter)
        assert result == {"ok": True, "packages": [], "count": 0}

    def test_source_list(self, mock_adapter, read_fixture):
        mock_adapter.set_output("source", read_fixture("source_export.jsonl"))
        result = source_list(adapter=mock_adapter)
        assert result["count"] == 2
        assert result["sources"][1]["identifier"] == "StoreEdgeFD"

    def test_source_list_table(self, mock_adapter, read_fixture):
        mock_adapter.set_output("source", read_fixture("source_list.txt"))
        result = source_list(adapter=mock_adapter, structured=False)
        assert result["count"] == 2
        assert mock_adapter.call_log[0].args == ["source", "list"]


class TestGetAdapter:
    def test_from_settings(self):
        adapter = get_adapter(Settings(winget_path="C:\\bin\\winget.exe", timeout=30))
        assert isinstance(adapter, WingetAdapter)
        assert adapter.executable == "C:\\bin\\winget.exe"

    def test_defaults(self):
        assert get_adapter().executable == "winget"
