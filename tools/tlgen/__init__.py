"""
tlgen: TL schema to Kotlin domain-model generator.

Parses a TDLib-style TL schema, sorts the generated types into topical
packages, and emits immutable kotlinx.serialization models together with
``toModel()`` adapters from the TdApi wire classes.
"""
