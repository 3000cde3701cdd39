"""Decoration prompt compilation for the Redecor service.

The prompt sent to the generation service is a fixed template with two
caller-supplied values: the public URL of the uploaded photo and the
requested decoration style.

Template Structure::

    [Persona: professional interior decorator]
    [Photo reference: public image URL] + [Requested style, verbatim]
    [Request: 5 short, concrete, actionable suggestions
     (furniture, colours, accessories, texture, lighting)]
    [Output contract: JSON object with a "suggestions" array of 5 strings]

The style is inserted verbatim: it is neither truncated nor escaped, and the
template is rendered by concatenation so that braces or the word
``suggestions`` inside the style cannot disturb the rendering.

Usage
-----
::

    prompt = build_decor_prompt(
        style="scandinave",
        image_url="https://example.com/uploads/1718031234567-482913.jpg",
    )
"""

from __future__ import annotations

SUGGESTION_COUNT = 5

# ---------------------------------------------------------------------------
# Fixed template sections.
# ---------------------------------------------------------------------------

_PERSONA = "Tu es un décorateur d'intérieur professionnel."

_REQUEST = (
    f"Donne {SUGGESTION_COUNT} suggestions courtes, concrètes et actionnables pour "
    "redécorer la pièce (meubles, couleurs, accessoires, texture, éclairage)."
)

_OUTPUT_CONTRACT = (
    'Répond en JSON avec une clé "suggestions" contenant un tableau de '
    f"{SUGGESTION_COUNT} strings."
)


def build_decor_prompt(style: str, image_url: str) -> str:
    """Render the instruction string for one decoration request.

    Pure function: identical inputs always produce identical output, and no
    I/O is performed.

    Args:
        style: Requested decoration style, passed through as-is.
        image_url: Public URL at which the uploaded photo is served.

    Returns:
        The compiled prompt, one section per line.
    """
    photo_line = (
        "L'utilisateur a fourni une photo (accessible à "
        + image_url
        + ") et souhaite un style : "
        + style
        + "."
    )
    return "\n".join([_PERSONA, photo_line, _REQUEST, _OUTPUT_CONTRACT])
