from xml.sax.saxutils import escape

from ..schemas import QuestionRecord

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def _url_entry(loc: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{loc}</loc>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>\n"
    )


def build_sitemap(records: list[QuestionRecord], base_url: str) -> str:
    """
    Renders the sitemap XML: the home page plus one entry per registered slug.
    Slugs are XML-escaped before being placed in <loc>.
    """
    base_url = base_url.rstrip("/")

    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>\n',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n',
        _url_entry(f"{escape(base_url)}/", "daily", "1.0"),
    ]
    for record in records:
        parts.append(_url_entry(f"{escape(base_url)}/question/{escape(record.slug)}", "weekly", "0.8"))
    parts.append("</urlset>\n")

    return "".join(parts)
