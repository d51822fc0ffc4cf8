"""
Built-in rule loaders.

These cover the common asset conversions of an npm bundle: copying files
through unchanged and wrapping JSON and CSS sources in JavaScript modules.
"""

import json
from typing import Any, Dict, Optional

from bundler.rules.loaders import LoaderRegistry


@LoaderRegistry.register("copy-loader")
def copy_loader(context, options: Dict[str, Any]) -> Optional[str]:
    """Pass content through unchanged so the file lands in the build."""
    return context.content


@LoaderRegistry.register("json-loader")
def json_loader(context, options: Dict[str, Any]) -> None:
    """Emit a `<file>.js` module exporting the parsed JSON content.
    
    Options:
        extension: Suffix of the generated module (default: ".js")
    """
    extension = options.get("extension", ".js")
    data = json.loads(context.content)
    
    context.extra_artifacts[f"{context.file_path}{extension}"] = (
        f"module.exports = {json.dumps(data)};\n"
    )
    context.log.info("json-loader", "Generated .js module to inline JSON")


@LoaderRegistry.register("style-loader")
def style_loader(context, options: Dict[str, Any]) -> None:
    """Emit a `<file>.js` module that injects the CSS into the document head."""
    extension = options.get("extension", ".js")
    css = json.dumps(context.content)
    
    context.extra_artifacts[f"{context.file_path}{extension}"] = (
        'var style = document.createElement("style");\n'
        'style.setAttribute("type", "text/css");\n'
        f"style.appendChild(document.createTextNode({css}));\n"
        'var head = document.querySelector("head");\n'
        "head.appendChild(style);\n"
    )
    context.log.info("style-loader", "Generated .js module to inject CSS")
