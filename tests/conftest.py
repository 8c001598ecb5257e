from pathlib import Path

import pytest

_FEED_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
<channel>
<title>Old blog</title>
<link>http://old.example.com</link>
{items}
</channel>
</rss>
"""

_ITEM_TEMPLATE = """<item>
<title>{title}</title>
<link>{link}</link>
<pubDate>{pub_date}</pubDate>
{categories}
<content:encoded><![CDATA[{body}]]></content:encoded>
</item>"""


def feed_item(title, link, pub_date, body="", categories=()):
    category_xml = "\n".join(
        f'<category domain="{domain}"><![CDATA[{term}]]></category>' for term, domain in categories
    )
    return _ITEM_TEMPLATE.format(
        title=title, link=link, pub_date=pub_date, categories=category_xml, body=body
    )


@pytest.fixture
def write_feed(tmp_path: Path):
    def _write(*items: str, name: str = "wordpress_export_1.xml") -> Path:
        feed_dir = tmp_path / "export"
        feed_dir.mkdir(exist_ok=True)
        path = feed_dir / name
        path.write_text(_FEED_TEMPLATE.format(items="\n".join(items)), encoding="utf-8")
        return path

    return _write
