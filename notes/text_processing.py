import markdown

from notes import conf, markdown_extensions


def get_extensions(math_settings=None, translator=None):
    if math_settings is None:
        math_settings = conf.get_math_settings()
    if translator is None:
        translator = conf.get_translator(math_settings)

    asciimath = markdown_extensions.AsciiMathExtension(math_settings, translator)
    latex_renderer = asciimath.renderer if math_settings.replace_math_block else None
    return [
        asciimath,
        markdown_extensions.LaTeX2MathMLExtension(renderer=latex_renderer),
        "markdown.extensions.fenced_code",
        "markdown.extensions.tables",
        "markdown.extensions.footnotes",
    ]


def md_to_html(markdown_string, math_settings=None, translator=None):
    """Return HTML from Markdown, with every formula rendered to MathML."""
    return markdown.markdown(
        markdown_string,
        extensions=get_extensions(math_settings, translator),
    )
