"""
Machine translation of structured content via DeepL.

Design:
1. DeeplClient sends ordered batches of strings to the provider
2. TranslationCache memoizes calls by a hash of batch, languages and options
3. Translator combines the two
4. ContentTranslator walks text/object/structure/blocks/layout fields and
   reassembles them around the translated strings

Usage:
    from machine_translation.i18n import ContentTranslator, Translator
    
    translator = Translator.from_settings(get_settings())
    engine = ContentTranslator(translator)
    
    field = await engine.translate_field(node.field("text"), "de", spec)
"""

from machine_translation.i18n.client import DeeplClient
from machine_translation.i18n.cache import TranslationCache
from machine_translation.i18n.translator import Translator
from machine_translation.i18n.content import ContentTranslator

__all__ = [
    "DeeplClient",
    "TranslationCache",
    "Translator",
    "ContentTranslator",
]
