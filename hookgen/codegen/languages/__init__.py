"""
Language-specific type generators.

TypeScript is the only target: the generated hooks are TypeScript.
"""

from .typescript import TypeScriptGenerator, TypeScriptSynthesizer

__all__ = ["TypeScriptGenerator", "TypeScriptSynthesizer"]
