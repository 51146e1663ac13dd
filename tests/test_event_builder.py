"""Unit tests for EventBuilder."""
import pytest
from bs4 import BeautifulSoup

from processor.event_builder import EventBuilder
from processor.exceptions import NoEventsFoundError
from processor.selector import select_candidate_nodes


def make_document(body: str) -> BeautifulSoup:
    return BeautifulSoup(f'<div class="mw-parser-output">{body}</div>', 'html.parser')


class TestEventBuilder:
    """Test cases for EventBuilder class."""

    def test_labeled_list_item(self):
        """Test extraction of a single labeled listing."""
        document = make_document("""
            <ul>
                <li><a href="/wiki/Event:Demo">Demo</a>
                    Dates: 2025-03-10 - 2025-03-12 Country: Kenya Event type: Workshop</li>
            </ul>
        """)

        events = EventBuilder().build_events(document)

        assert len(events) == 1
        event = events[0]
        assert event.title == "Demo"
        assert event.start_date == "2025-03-10"
        assert event.end_date == "2025-03-12"
        assert event.country == "Kenya"
        assert event.event_type == "Workshop"
        assert event.link == "https://sw.wikipedia.org/wiki/Event:Demo"
        assert event.id == event.link
        assert event.location == "Kenya"
        assert event.participation_options == ""
        assert event.topics == ()
        assert event.organizers == ()

    def test_full_card(self):
        """Test a card with every field present."""
        document = make_document("""
            <div class="ce-event-card" data-ce-event-id="42">
                <a href="//sw.wikipedia.org/wiki/Event:Hackathon_2025"
                   title="Hackathon ya Kiswahili">Hackathon</a>
                <div class="mw-event-location">Dar es Salaam</div>
                <p>Jiunge nasi kwa siku mbili za kuhariri.</p>
                <span>Tarehe: 12 March 2025 to 14 March 2025</span>
                <span>Nchi: Tanzania</span>
                <span>Aina ya tukio: Hackathon</span>
                <span>Ushiriki: Tukio la mtandaoni na la ana kwa ana</span>
                <span>Topics: Health; Education</span>
                <span>Waandaaji: Alice na Bob &amp; Carol</span>
            </div>
        """)

        event = EventBuilder().build_events(document)[0]

        assert event.title == "Hackathon ya Kiswahili"
        assert event.link == "https://sw.wikipedia.org/wiki/Event:Hackathon_2025"
        assert event.start_date == "12 March 2025"
        assert event.end_date == "14 March 2025"
        assert event.country == "Tanzania"
        assert event.location == "Dar es Salaam"
        assert event.event_type == "Hackathon"
        assert event.participation_options == "hybrid"
        assert event.topics == ("Health", "Education")
        assert event.organizers == ("Alice", "Bob", "Carol")
        assert event.description == "Jiunge nasi kwa siku mbili za kuhariri."

    def test_heuristics_when_labels_missing(self):
        """Test fallbacks for type, country, dates and location."""
        document = make_document("""
            <ul>
                <li><a href="/wiki/Event:Meetup">Nairobi meetup</a>
                    An in person meetup in Kenya on March 5, 2025</li>
            </ul>
        """)

        event = EventBuilder().build_events(document)[0]

        assert event.event_type == "Meetup"
        assert event.country == "Kenya"
        assert event.location == "Kenya"
        assert event.participation_options == "in-person"
        assert event.start_date == "March 5, 2025"
        assert event.end_date == "March 5, 2025"

    def test_no_dates(self):
        document = make_document('<ul><li><a href="/wiki/Event:X">X</a> Soon</li></ul>')

        event = EventBuilder().build_events(document)[0]

        assert event.start_date is None
        assert event.end_date is None
        assert event.event_type == "Other"

    def test_untitled_event(self):
        document = make_document('<ul><li><a href="/wiki/Event:X"></a> Country: Ghana</li></ul>')

        event = EventBuilder().build_events(document)[0]

        assert event.title == "Untitled event"
        assert event.country == "Ghana"

    def test_description_labels_stripped(self):
        document = make_document("""
            <ul><li><a href="/wiki/Event:X">X</a> Country: Kenya Event type: Workshop</li></ul>
        """)

        event = EventBuilder().build_events(document)[0]

        assert event.description == "X Kenya Workshop"

    def test_duplicate_links_keep_first(self):
        """Test that a second node with the same link is skipped."""
        document = make_document("""
            <ul>
                <li><a href="/wiki/Event:Demo">First</a> Country: Kenya</li>
                <li><a href="https://sw.wikipedia.org/wiki/Event:Demo">Second</a> Country: Uganda</li>
            </ul>
        """)

        events = EventBuilder().build_events(document)

        assert len(events) == 1
        assert events[0].title == "First"
        assert events[0].country == "Kenya"

    def test_duplicate_composite_keys_keep_first(self):
        """Test that differently linked listings of one event collapse."""
        document = make_document("""
            <ul>
                <li><a href="/wiki/Event:Demo">Demo</a> Dates: 2025-03-10 Country: Kenya</li>
                <li><a href="/wiki/Event:Demo_(copy)">Demo</a> Dates: 2025-03-10 Country: Uganda</li>
                <li><a href="/wiki/Event:Demo_later">Demo</a> Dates: 2025-04-10</li>
            </ul>
        """)

        events = EventBuilder().build_events(document)

        assert [e.link for e in events] == [
            "https://sw.wikipedia.org/wiki/Event:Demo",
            "https://sw.wikipedia.org/wiki/Event:Demo_later",
        ]
        keys = [e.composite_key for e in events]
        assert len(keys) == len(set(keys))

    def test_rejected_links_are_skipped(self):
        document = make_document("""
            <ul>
                <li><a href="http://evil.example/wiki/Event:Bad">Bad</a></li>
                <li><a href="/wiki/Event:Good">Good</a></li>
            </ul>
        """)

        events = EventBuilder().build_events(document)

        assert [e.title for e in events] == ["Good"]

    def test_no_candidates_is_an_error(self):
        """Test that an empty listing raises instead of returning nothing."""
        document = make_document("<p>Hakuna matukio</p>")

        with pytest.raises(NoEventsFoundError):
            EventBuilder().build_events(document)

    def test_only_rejected_links_is_an_error(self):
        document = make_document('<a href="http://evil.example/wiki/X">X</a>')

        with pytest.raises(NoEventsFoundError):
            EventBuilder().build_events(document)

    def test_custom_base_url(self):
        document = make_document('<ul><li><a href="/wiki/Event:X">X</a></li></ul>')

        event = EventBuilder(base_url="https://meta.wikimedia.org").build_events(document)[0]

        assert event.link == "https://meta.wikimedia.org/wiki/Event:X"


class TestSelectCandidateNodes:
    """Test cases for the selector cascade."""

    def test_specific_tier_wins(self):
        """Test that platform markers hide plain wiki links."""
        document = make_document("""
            <a href="/wiki/Main_Page">Main page</a>
            <div data-ce-event-id="1"><a href="/wiki/Event:A">A</a></div>
            <div class="event-card"><a href="/wiki/Event:B">B</a></div>
        """)

        nodes = select_candidate_nodes(document)

        assert len(nodes) == 1
        assert nodes[0]['data-ce-event-id'] == "1"

    def test_card_inside_list_item(self):
        document = make_document("""
            <div class="mw-ui-card"><a href="/wiki/Event:Stray">Stray</a></div>
            <div class="mw-list-item">
                <div class="mw-ui-card"><a href="/wiki/Event:A">A</a></div>
            </div>
        """)

        nodes = select_candidate_nodes(document)

        assert len(nodes) == 1
        assert nodes[0].a['href'] == "/wiki/Event:A"

    def test_event_details_links(self):
        document = make_document("""
            <a href="/wiki/Main_Page">Main page</a>
            <a href="/wiki/Special:EventDetails/7">Event 7</a>
        """)

        nodes = select_candidate_nodes(document)

        assert [n['href'] for n in nodes] == ["/wiki/Special:EventDetails/7"]

    def test_any_wiki_link_fallback(self):
        document = make_document("""
            <a href="/wiki/Event:A">A</a>
            <a href="https://example.org/page">External</a>
            <a href="/wiki/Event:B">B</a>
        """)

        nodes = select_candidate_nodes(document)

        assert [n['href'] for n in nodes] == ["/wiki/Event:A", "/wiki/Event:B"]

    def test_container_order(self):
        """Test that the collaboration list is preferred over the page body."""
        document = BeautifulSoup("""
            <main>
                <div class="mw-parser-output"><a href="/wiki/Other">Other</a></div>
                <div class="ext-campaignevents-collaborationlist">
                    <a href="/wiki/Event:A">A</a>
                </div>
            </main>
        """, 'html.parser')

        nodes = select_candidate_nodes(document)

        assert [n['href'] for n in nodes] == ["/wiki/Event:A"]

    def test_no_container(self):
        document = BeautifulSoup('<section><a href="/wiki/Event:A">A</a></section>', 'html.parser')

        assert select_candidate_nodes(document) == []
