"""Generated project files written next to the bundled packages."""

from __future__ import annotations

from collections.abc import Iterable

from starter_bundler.application.modes import PackagingMode, PlacementPolicy
from starter_bundler.schemas import LibraryBundle

EDITORCONFIG = """root = true
[*]
indent_style = tab
indent_size = 2
end_of_line = lf
charset = utf-8
trim_trailing_whitespace = true
insert_final_newline = true
max_line_length = 80

[*.{yml,yaml}]
indent_style = space"""

VSCODE_EXTENSIONS = """{
	"recommendations": [
		"ms-vscode.live-server",
		"esbenp.prettier-vscode",
		"ritwickdey.liveserver"
	]
}"""

VSCODE_SETTINGS = '{ "prettier.useEditorConfig": true }'

INDEX_JS = """

function setup(){
  const canvas = createCanvas(100,100);
  canvas.parent("sketch");
  background("black");
}

function draw() {}
"""

_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
    html,
    body {{
        height: 100%;
    }}

    body {{
        display: flex;
        justify-content: center;
        align-items: center;
    }}
    main {{
        height: 100%;
        display: flex;
        justify-content: center;
        flex-direction: column;
        align-items: flex-end;
    }}
    </style>
</head>
<body>
<main>
    <div id="sketch"></div>
    <a href="{entry_script}">souce code</a>
    </main>
{library_tags}

    <script src="{entry_script}"></script>
</body>
</html>"""

INDEX_HTML_PATH = "index.html"
INDEX_JS_PATH = "index.js"
WORKSPACE_FILES: dict[str, str] = {
    ".editorconfig": EDITORCONFIG,
    ".vscode/extensions.json": VSCODE_EXTENSIONS,
    ".vscode/settings.json": VSCODE_SETTINGS,
}


def script_tag(src: str, *, enabled: bool = True) -> str:
    tag = f'<script src="{src}"></script>'
    return f"    {tag}" if enabled else f"    <!-- {tag} -->"


def render_index_html(
    policy: PlacementPolicy,
    libraries: Iterable[LibraryBundle],
    *,
    title: str = "p5.js Starter Project",
) -> str:
    """Render the markup entry point for a placement policy.

    Every library gets a script tag; disabled libraries are commented out so
    they can be switched on by hand. Script sources come from
    ``policy.script_reference`` so they always match where the policy put the
    files.
    """
    tags = "\n".join(
        script_tag(policy.script_reference(library), enabled=library.enabled)
        for library in libraries
    )
    return _INDEX_HTML.format(
        title=title,
        entry_script=INDEX_JS_PATH,
        library_tags=tags,
    )


def generated_files(
    mode: PackagingMode,
    policy: PlacementPolicy,
    libraries: Iterable[LibraryBundle],
) -> dict[str, str]:
    """Return every generated file for ``mode``, keyed by archive path."""
    files: dict[str, str] = {}
    if mode.includes_workspace_files:
        files.update(WORKSPACE_FILES)
    files[INDEX_HTML_PATH] = render_index_html(policy, libraries)
    files[INDEX_JS_PATH] = INDEX_JS
    return files
