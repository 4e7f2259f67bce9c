from __future__ import annotations

from typing import Mapping, Optional

from attribution_engine.models.asset import Asset, Author
from attribution_engine.models.licence import Licence

from .session import QuestionnaireResult


UNKNOWN_AUTHOR = "unknown author"


def build_attribution(
    asset: Asset,
    licence: Licence,
    *,
    use_case: Optional[str] = None,
    change: Optional[str] = None,
    creator: Optional[str] = None,
    hide_author: bool = False,
) -> str:
    """
    Attribution notice: author, title, source, licence, modifications.

    Public-domain style licences are named without a link. Other licences carry
    their legal-code URL, except online where the licence name is expected to be
    rendered as a link by the presentation layer.
    """
    parts: list[str] = []

    if not hide_author:
        parts.append(asset.author_names() or UNKNOWN_AUTHOR)

    title = asset.get_title()
    if title:
        parts.append(f'"{title}"')

    url = asset.get_url()
    if url:
        parts.append(url)

    if licence.is_in_group("pd") or licence.is_in_group("cc0") or not licence.url:
        parts.append(licence.name)
    elif use_case == "online":
        parts.append(licence.name)
    else:
        parts.append(f"{licence.name} ({licence.url})")

    text = ", ".join(parts)

    if change:
        text += f", {change}"
        if creator:
            text += f" by {creator}"
    elif creator:
        text += f", modified by {creator}"

    return text


def attribution_for_questionnaire(result: QuestionnaireResult) -> str:
    return build_attribution(result.asset, result.licence, use_case=result.use_case)


def attribution_for_dialogue(
    asset: Asset,
    licence: Licence,
    data: Mapping[str, Mapping[str, str]],
) -> str:
    """
    Attribution from the short wizard's grouped data (typeOfUse, author, editing, ...).
    """
    author = data.get("author", {})
    if author.get("author"):
        asset = asset.with_authors(Author(name=author["author"]))

    edited = data.get("editing", {}).get("edited") == "true"
    return build_attribution(
        asset,
        licence,
        use_case=data.get("typeOfUse", {}).get("type"),
        change=data.get("change", {}).get("change") if edited else None,
        creator=data.get("creator", {}).get("name") if edited else None,
        hide_author=author.get("no-author") == "true",
    )
