"""HTML rendering of a result set."""

from __future__ import annotations

import re
from datetime import datetime
from html import escape

from ..status.result import Result, StatusList

_HTTP_KIND = re.compile(r"^http[46]?$")

_STYLE = """
      body { font-family: segoe ui, Roboto, Oxygen-Sans, Ubuntu, Cantarell, helvetica neue, Verdana, sans-serif; }
      h1 { margin-top: 30px; }
      ul { padding: 0px; }
      li { list-style: none; margin-bottom: 2px; padding: 5px; border-bottom: 1px solid #ddd; }
      a { text-decoration: none; color: #000; }
      .container { max-width: 600px; width: 100%; margin: 15px auto; }
      .panel { text-align: center; padding: 10px; border: 0px; border-radius: 5px; }
      .failed-bg { color: white; background-color: #E25D6A; }
      .success-bg { color: white; background-color: #52B86A; }
      .failed { color: #E25D6A; }
      .success { color: #52B86A; }
      .small { font-size: 80%; }
      .status { float: right; }"""


def _failed_item(r: Result) -> str:
    return (
        f"<li>{escape(r.name)} <span class='small failed'>({escape(r.message)})</span>"
        f"<span class='status failed'>Disrupted</span></li>"
    )


def _operational_item(r: Result) -> str:
    label = escape(r.name)
    if _HTTP_KIND.match(r.check.kind):
        label = f"<a href=\"{escape(r.check.target)}\">{label}</a>"
    return f"<li>{label} <span class='status success'>Operational</span></li>"


def render_html(
    statuses: StatusList,
    incidents: list[str],
    title: str,
    last_check: datetime,
    elapsed: float,
) -> str:
    """Render the status page; failures are listed first in each category."""
    outages = statuses.number_outages()
    if outages:
        banner = f"<li class='panel failed-bg'>{outages} Outage(s)</li>"
    else:
        banner = "<li class='panel success-bg'>All Systems Operational</li>"

    sections = []
    for category, results in statuses.categories().items():
        items = [_failed_item(r) for r in results if not r.succeed]
        items += [_operational_item(r) for r in results if r.succeed]
        sections.append(
            f"      <h1>{escape(category)}</h1>\n      <ul>\n"
            + "".join(f"        {item}\n" for item in items)
            + "      </ul>\n"
        )

    incidents_html = ""
    if incidents:
        incidents_html = "      <h1>Incidents</h1>\n" + "".join(
            f"      <p>{escape(incident)}</p>\n" for incident in incidents
        )

    body = "".join(sections)
    stamp = last_check.strftime("%Y-%m-%dT%H:%M:%S%z")

    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no">
    <title>{escape(title)}</title>
    <style>{_STYLE}
    </style>
  </head>
  <body>
    <div class='container'>
      <h1>Global Status</h1>
      <ul>
        {banner}
      </ul>
{body}      <p class=small> Last check: {stamp} (in {elapsed:.3f}s)</p>
{incidents_html}    </div>
  </body>
</html>
"""
