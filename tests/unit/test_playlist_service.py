"""
Unit tests for playlist rendering.
"""

import pytest

from sportsm3u.schemas import Event, EventChannel, PlayerType
from sportsm3u.services.fetch_types import StreamHeaders
from sportsm3u.services.playlist_service import (
    EMPTY_PLAYLIST,
    PLAYLIST_HEADER,
    build_entries,
    build_playlist,
    collect_links,
    extract_link,
)


HEADERS = StreamHeaders(user_agent="Agent/1.0 (X11; Linux)", referer="https://example.tv/", icy_metadata="1")


def _event(**channel) -> Event:
    return Event.model_validate({
        "match_name": "Home vs Away",
        "date": "2025-01-10T20:00:00Z",
        "competitors1_logo": "http://logo/home.png",
        "channel": channel,
    })


@pytest.mark.unit
class TestLinkExtraction:
    """Tests for extract_link and collect_links."""

    def test_extract_valid(self):
        channel = EventChannel(server1URL="http://s/1.m3u8")
        assert extract_link(channel, "server1URL") == "http://s/1.m3u8"

    @pytest.mark.parametrize("value", ["null", "NULL", "Null", "", None])
    def test_extract_rejects(self, value):
        channel = EventChannel(server1URL=value)
        assert extract_link(channel, "server1URL") is None

    def test_extract_without_channel(self):
        assert extract_link(None, "server1URL") is None

    def test_extract_unknown_field(self):
        assert extract_link(EventChannel(), "server9URL") is None

    def test_collect_in_server_order(self):
        event = _event(server3URL="http://s/3", server1URL="http://s/1", server2URL="http://s/2")
        assert collect_links(event) == ["http://s/1", "http://s/2", "http://s/3"]

    def test_collect_skips_invalid(self):
        event = _event(server1URL="NULL", server2URL=123, server3URL="http://s/3")
        assert collect_links(event) == ["http://s/3"]

    def test_collect_without_channel(self):
        assert collect_links(Event(match_name="No channel")) == []


@pytest.mark.unit
class TestBuildEntries:
    """Tests for per-event entry mapping."""

    def test_example_event(self, sample_event):
        entries = build_entries(sample_event, -5)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.group == "Soccer"
        assert entry.title == "Team A vs Team B - 2:00 PM ET - 6/15/2025"
        assert entry.url == "http://x/1.m3u8"
        assert entry.logo == "http://logo/a.png"

    def test_defaults(self):
        event = Event.model_validate({"channel": {"server1URL": "http://s/1"}})
        entry = build_entries(event)[0]

        assert entry.title == "Unknown Event"
        assert entry.group == "LIVE"
        assert entry.logo == ""

    def test_blank_name_and_bad_date(self):
        event = Event.model_validate({
            "match_name": "   ",
            "date": "soon",
            "channel": {"server1URL": "http://s/1", "TVCategory": {"name": ""}},
        })
        entry = build_entries(event)[0]

        assert entry.title == "Unknown Event"
        assert entry.group == "LIVE"

    def test_name_trimmed(self):
        event = Event.model_validate({"match_name": "  A vs B  ", "channel": {"server1URL": "http://s/1"}})
        assert build_entries(event)[0].title == "A vs B"

    def test_one_entry_per_link(self):
        event = _event(server1URL="http://s/1", server2URL="http://s/2")
        assert [entry.url for entry in build_entries(event)] == ["http://s/1", "http://s/2"]


@pytest.mark.unit
class TestBuildPlaylist:
    """Tests for build_playlist."""

    def test_starts_with_marker(self):
        assert build_playlist([], headers=HEADERS) == PLAYLIST_HEADER
        assert build_playlist([_event(server1URL="http://s/1")], headers=HEADERS).startswith("#EXTM3U\n")

    def test_vlc_example(self, sample_event):
        playlist = build_playlist([sample_event], -5, PlayerType.VLC, HEADERS)

        assert playlist.split("\n") == [
            "#EXTM3U",
            '#EXTINF:-1 tvg-logo="http://logo/a.png" group-title="Soccer",'
            "Team A vs Team B - 2:00 PM ET - 6/15/2025",
            "#EXTVLCOPT:http-user-agent=Agent/1.0 (X11; Linux)",
            "#EXTVLCOPT:http-referrer=https://example.tv/",
            "#EXTVLCOPT:http-icy-metadata=1",
            "http://x/1.m3u8",
        ]

    def test_kodi_lines(self, sample_event):
        lines = build_playlist([sample_event], -5, PlayerType.KODI, HEADERS).split("\n")

        assert lines[2:] == [
            "#KODIPROP:inputstream=inputstream.adaptive",
            "#KODIPROP:inputstream.adaptive.manifest_type=hls",
            "#KODIPROP:inputstream.adaptive.stream_headers="
            "User-Agent=Agent%2F1.0%20(X11%3B%20Linux)&Referer=https%3A%2F%2Fexample.tv%2F",
            "http://x/1.m3u8",
        ]

    def test_tivimate_single_line(self, sample_event):
        lines = build_playlist([sample_event], -5, PlayerType.TIVIMATE, HEADERS).split("\n")

        assert lines[2:] == [
            "http://x/1.m3u8|User-Agent=Agent/1.0 (X11; Linux)|Referer=https://example.tv/",
        ]

    @pytest.mark.parametrize("player_type,lines_per_link", [
        (PlayerType.VLC, 4),
        (PlayerType.KODI, 4),
        (PlayerType.TIVIMATE, 1),
    ])
    def test_lines_per_link(self, player_type, lines_per_link):
        events = [
            _event(server1URL="http://s/1", server2URL="http://s/2", server3URL="http://s/3"),
            _event(server1URL="null", server2URL="http://s/5"),
        ]
        lines = build_playlist(events, -5, player_type, HEADERS).split("\n")

        extinf_count = sum(1 for line in lines if line.startswith("#EXTINF"))
        assert extinf_count == 4
        assert len(lines) == 1 + extinf_count * (1 + lines_per_link)

    @pytest.mark.parametrize("player_type", list(PlayerType))
    def test_never_emits_null_link(self, player_type):
        events = [_event(server1URL="null", server2URL="NuLL", server3URL="http://ok/3")]
        lines = build_playlist(events, 0, player_type, HEADERS).split("\n")

        assert all(line.split("|")[0].lower() != "null" for line in lines)

    def test_unknown_player_renders_vlc(self, sample_event):
        assert build_playlist([sample_event], -5, "winamp", HEADERS) == build_playlist(
            [sample_event], -5, PlayerType.VLC, HEADERS
        )

    def test_string_player_type_accepted(self, sample_event):
        assert build_playlist([sample_event], -5, "TiviMate", HEADERS) == build_playlist(
            [sample_event], -5, PlayerType.TIVIMATE, HEADERS
        )

    def test_preserves_event_order(self):
        events = [
            Event.model_validate({"match_name": name, "channel": {"server1URL": f"http://s/{name}"}})
            for name in ["Zeta", "Alpha", "Mu"]
        ]
        playlist = build_playlist(events, 0, PlayerType.TIVIMATE, HEADERS)
        titles = [line.split(",", 1)[1] for line in playlist.split("\n") if line.startswith("#EXTINF")]

        assert titles == ["Zeta", "Alpha", "Mu"]

    def test_event_without_links_contributes_nothing(self):
        assert build_playlist([_event(server1URL="null")], headers=HEADERS) == "#EXTM3U"

    def test_no_trailing_newline(self, sample_event):
        assert not build_playlist([sample_event], headers=HEADERS).endswith("\n")

    def test_default_headers_from_settings(self, sample_event):
        playlist = build_playlist([sample_event])
        assert "#EXTVLCOPT:http-referrer=https://pixelsport.tv/" in playlist

    def test_empty_playlist_constant(self):
        assert EMPTY_PLAYLIST == "#EXTM3U\n# No live events currently available"
