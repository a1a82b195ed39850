"""Pytest configuration and fixtures for az_doc_scraper tests."""

import json
import asyncio

import pytest

from az_doc_scraper.config import DOCS_BASE_URL, REFERENCE_URL, RELEASE_URL
from az_doc_scraper.errors import FetchFailure

GROUP_URL = DOCS_BASE_URL + "group?view=azure-cli-latest"
WEBAPP_URL = DOCS_BASE_URL + "webapp?view=azure-cli-latest"
WEBAPP_AUTH_URL = DOCS_BASE_URL + "webapp/auth?view=azure-cli-latest"
WEBAPP_AUTH_APPLE_URL = DOCS_BASE_URL + "webapp/auth/apple?view=azure-cli-latest"
ML_V1_URL = DOCS_BASE_URL + "ml?view=azure-cli-latest"
ML_V2_URL = DOCS_BASE_URL + "ml?view=azure-cli-extensions"

GLOBAL_PARAMETERS = """
<details>
  <summary>Global Parameters</summary>
  <div><code class="parameterName">--debug</code></div>
  <div class="parameterInfo">Increase logging verbosity to show all debug logs.</div>
  <div><code class="parameterName">--help -h</code></div>
  <div class="parameterInfo">Show this help message and exit.</div>
  <div><code class="parameterName">--only-show-errors</code></div>
  <div class="parameterInfo">Only show errors, suppressing warnings.</div>
  <div><code class="parameterName">--output -o</code></div>
  <div class="parameterInfo">Output format.
    Accepted values: json, jsonc, none, table, tsv, yaml, yamlc
    Default value: json
  </div>
</details>
"""


def page(title, body, summary=""):
    summary_html = f'<p class="summary">{summary}</p>' if summary else ""
    return f"""<html><head><title>{title} | Microsoft Learn</title></head>
<body><main>
<h1>{title}</h1>
{summary_html}
{body}
</main></body></html>"""


def listing(rows):
    cells = "\n".join(
        f'<tr><td><a href="{href}">{label}</a>{extra}</td><td>{description}</td></tr>'
        for label, extra, href, description in rows
    )
    return f"<table><thead><tr><th>Name</th><th>Description</th></tr></thead><tbody>{cells}</tbody></table>"


def command(command_id, label, description, required=(), optional=()):
    """Render one command section the way the reference pages lay it out."""
    parts = [f'<div class="heading"><h2 id="{command_id}">{label}</h2></div>', f"<p>{description}</p>"]
    for suffix, title, params in (
        ("required-parameters", "Required Parameters", required),
        ("optional-parameters", "Optional Parameters", optional),
    ):
        if not params:
            continue
        parts.append(f'<h3 id="{command_id}-{suffix}">{title}</h3>')
        for name, info in params:
            parts.append(f'<div><code class="parameterName">{name}</code></div>')
            parts.append(f'<div class="parameterInfo">{info}</div>')
    parts.append(GLOBAL_PARAMETERS)
    return "\n".join(parts)


REFERENCE_PAGE = page(
    "az",
    listing(
        [
            ("az group", " (preview)", "/en-us/cli/azure/group?view=azure-cli-latest", "Manage resource groups and template deployments."),
            ("az login", "", "/en-us/cli/azure/reference-index?view=azure-cli-latest#az-login", "Log in to Azure."),
            ("az ml", "", "/en-us/cli/azure/ml?view=azure-cli-latest", "Manage Azure Machine Learning resources (v1)."),
            ("az ml", " (extension)", "/en-us/cli/azure/ml?view=azure-cli-extensions", "Manage Azure Machine Learning resources (v2)."),
            ("az webapp", "", "/en-us/cli/azure/webapp?view=azure-cli-latest#az-webapp-create", "Manage web apps."),
        ]
    )
    + GLOBAL_PARAMETERS
    + command(
        "az-login",
        "az login",
        "Log in to Azure.",
        optional=[
            ("--tenant -t", "The AAD tenant, must be provided when using a service principal."),
            ("--use-device-code", "Use CLI's old authentication flow based on device code. Default value: False."),
        ],
    ),
)

GROUP_PAGE = page(
    "az group",
    listing(
        [
            ("az group create", "", "/en-us/cli/azure/group?view=azure-cli-latest#az-group-create", "Create a new resource group."),
            ("az group delete", "", "/en-us/cli/azure/group?view=azure-cli-latest#az-group-delete", "Delete a resource group."),
        ]
    )
    + command(
        "az-group-create",
        "az group create",
        "Create a new resource group.",
        required=[
            ("--location -l", "Location. Values from: az account list-locations."),
            ("--name --resource-group -g -n", "Name of the new resource group."),
        ],
        optional=[
            ("--tags", "Space-separated tags: key[=value] [key[=value] ...]."),
        ],
    )
    + command(
        "az-group-delete",
        "az group delete",
        "Delete a resource group.",
        required=[("--name --resource-group -g -n", "Name of resource group.")],
        optional=[
            ("--no-wait", "Do not wait for the long-running operation to finish. Default value: False."),
            ("--yes -y", "Do not prompt for confirmation."),
        ],
    ),
    summary="Manage resource groups and template deployments.",
)

WEBAPP_PAGE = page(
    "az webapp",
    listing(
        [
            ("az webapp auth", "", "/en-us/cli/azure/webapp/auth?view=azure-cli-latest", "Manage webapp authentication."),
            ("az webapp auth apple", "", "/en-us/cli/azure/webapp/auth/apple?view=azure-cli-latest", "Manage Apple auth."),
            ("az webapp create", "", "/en-us/cli/azure/webapp?view=azure-cli-latest#az-webapp-create", "Create a web app."),
        ]
    )
    + command(
        "az-webapp-create",
        "az webapp create",
        "Create a web app.",
        required=[("--name -n", "Name of the new web app.")],
    ),
    summary="Manage web apps.",
)

WEBAPP_AUTH_PAGE = page(
    "az webapp auth",
    command("az-webapp-auth-show", "az webapp auth show", "Show the authentication settings."),
    summary="Manage webapp authentication and authorization.",
)

WEBAPP_AUTH_APPLE_PAGE = page(
    "az webapp auth apple (preview)",
    command(
        "az-webapp-auth-apple-update",
        "az webapp auth apple update (preview)",
        "Update the client id and client secret for the Apple identity provider.",
        optional=[("--client-id", "The Client ID of the app used for login.")],
    ),
    summary="Manage webapp authentication and authorization of the Apple identity provider.",
)

ML_V1_PAGE = page("az ml", listing([]), summary="Manage Azure Machine Learning resources.")

RELEASE_PAGE = "<html><head><title>Release Azure CLI 2.53.0 · Azure/azure-cli · GitHub</title></head><body></body></html>"


class FakeFetcher:
    """Serves canned pages and records what was requested."""

    def __init__(self, pages, delays=None):
        self.pages = dict(pages)
        self.delays = delays or {}
        self.requests = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url):
        self.requests.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            if url not in self.pages:
                raise FetchFailure(url, status=404)
            return self.pages[url]
        finally:
            self.in_flight -= 1


def read_spec(path):
    """Pull the JSON object out of a generated TypeScript spec module."""
    with open(path, encoding="utf-8") as f:
        first_line = f.readline()
    return json.loads(first_line.split("=", 1)[1])


@pytest.fixture
def site_pages():
    return {
        RELEASE_URL: RELEASE_PAGE,
        REFERENCE_URL: REFERENCE_PAGE,
        GROUP_URL: GROUP_PAGE,
        WEBAPP_URL: WEBAPP_PAGE,
        WEBAPP_AUTH_URL: WEBAPP_AUTH_PAGE,
        WEBAPP_AUTH_APPLE_URL: WEBAPP_AUTH_APPLE_PAGE,
        ML_V1_URL: ML_V1_PAGE,
    }


@pytest.fixture
def fake_fetcher(site_pages):
    return FakeFetcher(site_pages)


@pytest.fixture
def output_root(tmp_path):
    root = tmp_path / "src"
    root.mkdir()
    return root
