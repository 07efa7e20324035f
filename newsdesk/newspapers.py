from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Newspaper:
    id: str
    name: str
    url: str
    rss_url: str
    country: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "rssUrl": self.rss_url,
            "country": self.country,
        }


NEWSPAPERS = (
    # Italy
    Newspaper("televideo", "Televideo RAI", "https://www.servizitelevideo.rai.it/televideo/pub/index.jsp",
              "https://www.servizitelevideo.rai.it/televideo/pub/rss102.xml", "IT"),
    Newspaper("il-fatto", "Il Fatto Quotidiano", "https://www.ilfattoquotidiano.it/",
              "https://www.ilfattoquotidiano.it/feed/", "IT"),
    Newspaper("repubblica", "Repubblica", "https://www.repubblica.it/",
              "https://www.repubblica.it/rss/homepage/rss2.0.xml", "IT"),
    Newspaper("ansa", "ANSA", "https://www.ansa.it/",
              "https://www.ansa.it/sito/ansait_rss.xml", "IT"),
    Newspaper("il-sole-24-ore", "Il Sole 24 Ore", "https://www.ilsole24ore.com/",
              "https://www.ilsole24ore.com/rss/mondo--europa.xml", "IT"),
    Newspaper("sky-tg24", "SkyTg24", "https://tg24.sky.it/",
              "https://tg24.sky.it/rss/home.xml", "IT"),
    Newspaper("internazionale", "Internazionale", "https://www.internazionale.it/",
              "https://www.internazionale.it/sitemaps/rss.xml", "IT"),
    # Germany
    Newspaper("dw", "Deutsche Welle", "https://www.dw.com/",
              "https://rss.dw.com/xml/rss-de-all", "DE"),
    Newspaper("tagesschau", "Tagesschau", "https://www.tagesschau.de/",
              "https://www.tagesschau.de/inland/index~rss2.xml", "DE"),
    Newspaper("sueddeutsche", "Süddeutsche Zeitung", "https://www.sueddeutsche.de/",
              "https://rss.sueddeutsche.de/rss/Topthemen", "DE"),
    Newspaper("faz", "Frankfurter Allgemeine", "https://www.faz.net/",
              "https://www.faz.net/rss/aktuell", "DE"),
    Newspaper("spiegel", "Der Spiegel", "https://www.spiegel.de/",
              "https://www.spiegel.de/schlagzeilen/tops/index.rss", "DE"),
    # International
    Newspaper("reuters", "Reuters", "https://www.reuters.com/",
              "https://www.reuters.com/rssfeed/worldNews", "US"),
    Newspaper("nytimes", "New York Times", "https://www.nytimes.com/",
              "https://rss.nytimes.com/services/xml/rss/nyt/World.xml", "US"),
    Newspaper("euronews", "EuroNews", "https://www.euronews.com/",
              "https://www.euronews.com/rss?format=mrss&level=vertical&name=my-europe", "EU"),
)

_BY_ID = {n.id: n for n in NEWSPAPERS}


def get_newspaper(newspaper_id: str) -> Optional[Newspaper]:
    return _BY_ID.get((newspaper_id or "").strip().lower())


def by_country(country: Optional[str] = None) -> List[Newspaper]:
    """All newspapers, or only those for a country code ("IT", "DE", "US", "EU")."""
    if not country:
        return list(NEWSPAPERS)
    code = country.strip().upper()
    return [n for n in NEWSPAPERS if n.country == code]
