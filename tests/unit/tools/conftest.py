"""Fixtures for DataForSEO and page fetch tests."""

import pytest


@pytest.fixture
def competitor_html() -> str:
    """Competitor page with navigation chrome around the main content."""
    article = " ".join(["Arsenal fans travel from across London to the Emirates Stadium."] * 10)
    return f"""<html>
<head>
  <title>Arsenal Tickets | Example</title>
  <meta name="description" content="Find Arsenal tickets for every match.">
  <script>var tracking = "ignore me";</script>
</head>
<body>
  <nav>Home Football Concerts Theatre</nav>
  <div class="sidebar">Short promo</div>
  <main><h2>Match day</h2><p>{article}</p></main>
  <footer>Copyright footer text</footer>
</body>
</html>"""


@pytest.fixture
def serp_items() -> list[dict]:
    return [
        {"type": "paid", "rank_absolute": 1, "url": "https://ads.example.com", "domain": "ads.example.com"},
        {
            "type": "organic",
            "rank_absolute": 3,
            "title": "Arsenal Tickets - StubHub",
            "url": "https://www.stubhub.com/arsenal-tickets",
            "domain": "www.stubhub.com",
            "description": "Buy Arsenal tickets",
        },
        {
            "type": "featured_snippet",
            "rank_absolute": 2,
            "title": "Arsenal ticket guide",
            "url": "https://guide.example.com/arsenal",
            "domain": "guide.example.com",
        },
        {
            "type": "organic",
            "rank_absolute": 4,
            "title": "Arsenal Tickets | SeatPick",
            "url": "https://seatpick.com/arsenal-tickets",
            "domain": "seatpick.com",
        },
        {
            "type": "organic",
            "rank_absolute": 5,
            "title": "Official Arsenal",
            "url": "https://www.arsenal.com/tickets",
            "domain": "www.arsenal.com",
        },
    ]
