"""Scraper that rebuilds the az command tree from the Azure CLI reference docs."""

from .doc_crawler import DocCrawler
from .errors import (
    FetchFailure,
    PageStructureError,
    PreconditionFailure,
    ScraperError,
    VersionResolutionFailure,
)
from .models import Argument, CommandNode, Option
from .page_fetcher import PageFetcher
from .spec_writer import SpecWriter

__version__ = "0.1.0"
