"""Layout building blocks shared across pages."""
from __future__ import annotations

from markupsafe import Markup, escape

NAV_LINKS = (
    ("Explore Reports", "/explore"),
    ("API", "/docs"),
)


def navbar(*, brand: str, active: str | None = None) -> Markup:
    links_html: list[str] = []
    for label, href in NAV_LINKS:
        state_class = "bg-green-700 text-white" if active == href else "text-green-100 hover:bg-green-700 hover:text-white"
        links_html.append(
            f'<a href="{href}" class="rounded-md px-3 py-2 text-sm font-medium transition-colors {state_class}">'
            f"{escape(label)}</a>"
        )

    return Markup(
        '<nav class="bg-green-600 shadow-lg">'
        '<div class="mx-auto flex h-16 max-w-7xl items-center justify-between px-4 sm:px-6 lg:px-8">'
        f'<a href="/explore" class="text-xl font-bold text-white">{escape(brand)}</a>'
        f'<div class="flex items-center space-x-8">{"".join(links_html)}</div>'
        "</div>"
        "</nav>"
    )


__all__ = ["NAV_LINKS", "navbar"]
