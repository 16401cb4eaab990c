"""Configured news sources and the registry built from them."""

from ..config import load_config
from ..log import log
from .base import SourceDescriptor
from .listing import ListingAdapter, SiteConfig, normalize_whitespace

GOVBR = "https://www.gov.br"
GOVBR_ITEMS = ".listagem .item, .tileListaNoticias .item"
GOVBR_DATES = ".data, .data-publicacao"


class IbgeAdapter(ListingAdapter):
    """IBGE listing entries are bare anchors; the title may only live in @title."""

    def extract_title(self, el, link) -> str:
        node = el.select_one(self.site.title_selector)
        title = normalize_whitespace(node.get_text(" ") if node else "")
        return title or normalize_whitespace(link.get("title"))


def _govbr(path: str) -> SiteConfig:
    return SiteConfig(
        listing_url=GOVBR + path,
        item_selector=GOVBR_ITEMS,
        base_url=GOVBR,
        date_text_selector=GOVBR_DATES,
    )


# key, display name, colour, adapter
SITES = [
    ("un_news_pt", "UN News (PT)", "#1d4ed8", ListingAdapter("un_news_pt", SiteConfig(
        listing_url="https://news.un.org/pt/news?page=0",
        item_selector=".view-content .views-row",
        link_selector="h2 a",
        base_url="https://news.un.org",
        date_text_selector=".views-field-created .field-content",
    ))),
    ("mre_notas", "MRE – Notas à Imprensa", "#16a34a", ListingAdapter(
        "mre_notas", _govbr("/mre/pt-br/canais_atendimento/imprensa/notas-a-imprensa"),
    )),
    ("unep_es", "UNEP (ES) – Recursos", "#ef4444", ListingAdapter("unep_es", SiteConfig(
        listing_url="https://www.unep.org/es/resources/filter/sort_by=publication_date/sort_order=desc/page=0",
        item_selector=".view-content .views-row, .search-result",
        link_selector="h3 a, h2 a",
        base_url="https://www.unep.org",
        date_text_selector=".date, .field--name-field-date",
    ))),
    ("unfccc", "UNFCCC – News", "#0ea5e9", ListingAdapter("unfccc", SiteConfig(
        listing_url="https://unfccc.int/news",
        item_selector=".view-content .views-row, article, .news-listing .news-item",
        link_selector="h2 a, h3 a",
        base_url="https://unfccc.int",
        date_text_selector=".date",
    ))),
    ("relacoes_exteriores", "Relações Exteriores (Artigos)", "#9333ea", ListingAdapter(
        "relacoes_exteriores", SiteConfig(
            listing_url="https://relacoesexteriores.com.br/analises/artigo/",
            item_selector="article",
            link_selector="h2 a, .entry-title a",
            date_text_selector=".posted-on",
        ),
    )),
    ("mma", "MMA – Notícias", "#16a34a", ListingAdapter("mma", _govbr("/mma/pt-br/noticias"))),
    ("infobrics", "InfoBRICS – News", "#ef4444", ListingAdapter("infobrics", SiteConfig(
        listing_url="https://infobrics.org/en/news/",
        item_selector=".news-list .news-item, article, .content .news",
        title_selector="h3, h2",
        base_url="https://infobrics.org",
        date_text_selector=".date, time",
        text_before_attr=True,
    ))),
    ("ibge", "IBGE – Agência de Notícias", "#1f2937", IbgeAdapter("ibge", SiteConfig(
        listing_url="https://agenciadenoticias.ibge.gov.br/agencia-noticias.html",
        item_selector=".lista-noticias a",
        link_selector=None,
        title_selector=".titulo",
        base_url="https://agenciadenoticias.ibge.gov.br",
        image_attrs=("data-src", "src"),
        date_text_selector=".data-publicacao, time",
        text_before_attr=True,
    ))),
    ("mdic", "MDIC – Notícias", "#1d4ed8", ListingAdapter("mdic", _govbr("/mdic/pt-br/assuntos/noticias"))),
    ("govbr_meio_ambiente", "Gov.br – Meio Ambiente e Clima", "#0d9488", ListingAdapter(
        "govbr_meio_ambiente", _govbr("/pt-br/noticias/meio-ambiente-e-clima"),
    )),
    ("eir", "E-IR Articles", "#dc2626", ListingAdapter("eir", SiteConfig(
        listing_url="https://www.e-ir.info/category/articles/",
        item_selector="article",
        link_selector="h2 a, .entry-title a",
        date_text_selector=".posted-on",
    ))),
]


def load_sources(config: dict | None = None) -> tuple[SourceDescriptor, ...]:
    """Build the registry of enabled sources, in display order.

    config.json may disable sources: {"sources": {"eir": {"enabled": false}}}
    """
    if config is None:
        config = load_config()
    source_config = config.get("sources", {}) or {}

    registry = []
    for key, name, color, adapter in SITES:
        src_cfg = source_config.get(key, {}) or {}
        if not src_cfg.get("enabled", True):
            log(f"Source {key} disabled in config", "sources")
            continue
        registry.append(SourceDescriptor(key=key, name=name, color=color, adapter=adapter))
    return tuple(registry)
