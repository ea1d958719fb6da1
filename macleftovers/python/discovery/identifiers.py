"""Identifier normalization.

Every directory entry is compared with an app through a handful of
canonical tokens derived once per run from the app's bundle identifier,
name and bundle path. Tokens are lowercase and free of separators, so
"com.Example.My-App" and "Com Example MyApp" compare equal.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from ..scanners.applications import AppDescriptor

_NON_ALNUM = re.compile(r'[\W_]+', re.UNICODE)

# Single-component bundle ids shorter than this match too much to be useful
MIN_SINGLE_COMPONENT_LENGTH = 5


def normalize(value: str) -> str:
    """Strip non-alphanumeric characters and lowercase.

    Examples:
        >>> normalize("com.Example.My-App")
        'comexamplemyapp'
        >>> normalize("Visual Studio Code")
        'visualstudiocode'
    """
    return _NON_ALNUM.sub('', value).lower()


def item_token(name: str) -> str:
    """Token for a directory entry name: dots and spaces removed, lowercased.

    Examples:
        >>> item_token("com.example.MyApp.plist")
        'comexamplemyappplist'
        >>> item_token("MyApp Helper")
        'myapphelper'
    """
    return name.replace('.', '').replace(' ', '').lower()


def derive_suffix(bundle_id: str) -> str:
    """Join the last two bundle-id components, lowercased.

    Single-character placeholder components ("-") are ignored.

    Examples:
        >>> derive_suffix("com.example.notes")
        'examplenotes'
        >>> derive_suffix("com.example.-")
        'comexample'
    """
    components = [c.lower() for c in bundle_id.split('.') if c != '-']
    return ''.join(components[-2:])


def is_valid_bundle_identifier(bundle_id: str) -> bool:
    """Check whether a bundle id is specific enough to match on.

    Multi-component ids are always valid. A single-component id is valid
    only when it has at least 5 characters.

    Examples:
        >>> is_valid_bundle_identifier("com.example.app")
        True
        >>> is_valid_bundle_identifier("app")
        False
    """
    if len(bundle_id.split('.')) == 1:
        return len(bundle_id) >= MIN_SINGLE_COMPONENT_LENGTH
    return True


@dataclass(frozen=True)
class IdentifierSet:
    """Canonical match tokens for one app.

    Attributes:
        bundle_id_normalized: normalize(bundle_id)
        bundle_suffix: last two bundle-id components joined
        name_normalized: normalize(app_name)
        name_letters: name_normalized with only letters kept
        name_path_stem: normalize(bundle file name without ".app")
        use_bundle_id: whether the bundle id is specific enough to match on
    """
    bundle_id_normalized: str
    bundle_suffix: str
    name_normalized: str
    name_letters: str
    name_path_stem: str
    use_bundle_id: bool


def build_identifiers(app: AppDescriptor) -> IdentifierSet:
    """Derive the IdentifierSet for an app."""
    name_normalized = normalize(app.app_name)
    stem = Path(app.path).name.removesuffix('.app')

    return IdentifierSet(
        bundle_id_normalized=normalize(app.bundle_id),
        bundle_suffix=derive_suffix(app.bundle_id),
        name_normalized=name_normalized,
        name_letters=''.join(c for c in name_normalized if c.isalpha()),
        name_path_stem=normalize(stem),
        use_bundle_id=is_valid_bundle_identifier(app.bundle_id),
    )
