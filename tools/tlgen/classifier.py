"""
Category classifier: sorts return-type names into topical packages.

There is no exhaustive name → package table.  Instead every name is split
into its capitalised words and the words are clustered by global
frequency:

1. provisional category per name: the rarest word with a manual anchor,
   else the rarest word frequent enough to form its own cluster, else the
   name's most frequent word;
2. provisional categories with fewer than ``min_cluster_size`` members
   are rejected;
3. names in rejected categories are re-homed through the anchors or
   through a word → category majority vote taken over the accepted
   names, falling back to ``misc``.

Frequencies and votes are global, so the index must be built from the
complete name set; adding a single name may move any other name.
"""

import re
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from .log import get_logger

logger = get_logger("classifier")

MISC = "misc"

DEFAULT_MIN_CLUSTER_SIZE = 4

_WORD_RE = re.compile(r"[A-Z][a-z0-9]*")

# Structural or generic words that say nothing about the topic.
STOP_WORDS = frozenset({
    "A", "An", "And", "At", "By", "For", "From", "In", "Of", "On", "Or",
    "The", "To", "With",
    "Type", "Types", "Info", "Id", "Ids", "Status", "State", "Data",
    "Result", "Results", "Value", "Values", "Kind", "Mode", "Full",
    "Basic", "Default", "Empty", "Count", "Object", "Objects", "Item",
    "Items", "Part", "Parts", "Source", "Option", "Options", "Parameters",
    "New", "Old", "Added", "Removed", "Changed", "Deleted", "Updated",
    "Enabled", "Disabled", "Pending", "Active", "Is", "Can", "Has",
    "Yes", "No", "Not", "None",
})

# Hand-picked word → category overrides applied before clustering.
ANCHORS: Dict[str, str] = {
    "Chat": "chat",
    "Chats": "chat",
    "Supergroup": "chat",
    "Forum": "chat",
    "Secret": "chat",
    "Message": "message",
    "Messages": "message",
    "Reply": "message",
    "Reaction": "message",
    "Reactions": "message",
    "User": "user",
    "Users": "user",
    "Contact": "user",
    "Sticker": "sticker",
    "Stickers": "sticker",
    "Emoji": "sticker",
    "File": "file",
    "Files": "file",
    "Photo": "media",
    "Video": "media",
    "Audio": "media",
    "Animation": "media",
    "Voice": "media",
    "Document": "media",
    "Thumbnail": "media",
    "Call": "call",
    "Group": "call",
    "Payment": "payment",
    "Invoice": "payment",
    "Star": "payment",
    "Stars": "payment",
    "Premium": "premium",
    "Story": "story",
    "Stories": "story",
    "Update": "update",
    "Notification": "notification",
    "Notifications": "notification",
    "Proxy": "network",
    "Network": "network",
    "Passport": "passport",
    "Bot": "bot",
    "Inline": "bot",
    "Keyboard": "bot",
    "Game": "bot",
    "Background": "theme",
    "Theme": "theme",
    "Authorization": "auth",
    "Session": "auth",
    "Password": "auth",
    "Language": "localization",
    "Storage": "storage",
    "Log": "log",
    "Text": "text",
    "Entity": "text",
    "Business": "business",
    "Gift": "gift",
    "Gifts": "gift",
}


def split_words(name: str, stop_words: Iterable[str] = STOP_WORDS) -> List[str]:
    """``ChatTypeBasicGroup`` → ``["Chat", "Group"]`` (stop words dropped)."""
    stop = set(stop_words)
    return [w for w in _WORD_RE.findall(name) if w not in stop]


def singularize(word: str) -> str:
    """Light plural stripping for minted category names."""
    word = word.lower()
    if word.endswith("ies"):
        return word[:-3] + "y"
    if (word.endswith("s") and not word.endswith(("ss", "us", "is"))
            and len(word) > 4):
        return word[:-1]
    return word


@dataclass(frozen=True)
class CategoryIndex:
    """Immutable result of :func:`build_index`."""
    assignments: Mapping[str, str]       # name → final category
    frequencies: Mapping[str, int]       # word → occurrence count
    majority: Mapping[str, str]          # word → allowed category
    anchors: Mapping[str, str]
    allowed: FrozenSet[str]
    stop_words: FrozenSet[str]
    min_cluster_size: int

    def get(self, name: str) -> str:
        """Category for ``name``.

        Names seen at build time return their stored category.  Unknown
        names are placed through anchors and the majority vote only, so
        they can join an existing category but never create one.
        """
        if name in self.assignments:
            return self.assignments[name]
        return self._rehome(split_words(name, self.stop_words))

    def categories(self) -> Dict[str, List[str]]:
        """Category → sorted member names."""
        grouped: Dict[str, List[str]] = defaultdict(list)
        for name, category in self.assignments.items():
            grouped[category].append(name)
        return {c: sorted(grouped[c]) for c in sorted(grouped)}

    def _by_rarity(self, words: List[str]) -> List[str]:
        return sorted(words, key=lambda w: self.frequencies.get(w, 0))

    def _rehome(self, words: List[str]) -> str:
        for word in self._by_rarity(words):
            anchored = self.anchors.get(word)
            if anchored is not None and anchored in self.allowed:
                return anchored
            if word in self.majority:
                return self.majority[word]
        return MISC


def _provisional(words: List[str], frequencies: Mapping[str, int],
                 anchors: Mapping[str, str], min_cluster_size: int) -> str:
    if not words:
        return MISC

    by_rarity = sorted(words, key=lambda w: frequencies[w])
    for word in by_rarity:
        if word in anchors:
            return anchors[word]

    for word in by_rarity:
        if frequencies[word] >= min_cluster_size:
            return singularize(word)

    # Nothing clusters on its own; keep the dominant word together.
    dominant = max(words, key=lambda w: frequencies[w])
    return singularize(dominant)


def _majority_map(members: Mapping[str, List[str]],
                  assignments: Mapping[str, str]) -> Dict[str, str]:
    votes: Dict[str, Counter] = defaultdict(Counter)
    for name, words in members.items():
        category = assignments[name]
        for word in words:
            votes[word][category] += 1

    majority: Dict[str, str] = {}
    for word, counter in votes.items():
        # highest vote first, alphabetical among ties
        best = min(counter.items(), key=lambda kv: (-kv[1], kv[0]))
        majority[word] = best[0]
    return majority


def build_index(names: Iterable[str],
                anchors: Optional[Mapping[str, str]] = None,
                stop_words: Optional[Iterable[str]] = None,
                min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE) -> CategoryIndex:
    """Classify the complete set of return-type names.

    Args:
        names: Every return-type name of the schema.  Duplicates are
            ignored; order does not affect the result.
        anchors: Word → category overrides (defaults to ``ANCHORS``).
        stop_words: Words ignored during tokenisation (defaults to
            ``STOP_WORDS``).
        min_cluster_size: Smallest member count a category needs to be
            kept.

    Returns:
        A :class:`CategoryIndex` answering ``get`` for any name.
    """
    if min_cluster_size < 1:
        raise ValueError("min_cluster_size must be >= 1")

    anchors = dict(ANCHORS if anchors is None else anchors)
    stop = frozenset(STOP_WORDS if stop_words is None else stop_words)
    unique = sorted(set(names))

    words_of = {name: split_words(name, stop) for name in unique}

    frequencies: Counter = Counter()
    for words in words_of.values():
        frequencies.update(words)

    provisional = {
        name: _provisional(words, frequencies, anchors, min_cluster_size)
        for name, words in words_of.items()
    }

    sizes = Counter(provisional.values())
    allowed = frozenset(
        c for c, size in sizes.items() if c != MISC and size >= min_cluster_size)

    settled = {n: w for n, w in words_of.items() if provisional[n] in allowed}
    majority = _majority_map(settled, provisional)

    index = CategoryIndex(
        assignments={},
        frequencies=dict(frequencies),
        majority=majority,
        anchors=anchors,
        allowed=allowed,
        stop_words=stop,
        min_cluster_size=min_cluster_size,
    )

    assignments: Dict[str, str] = {}
    for name in unique:
        if provisional[name] in allowed:
            assignments[name] = provisional[name]
        else:
            assignments[name] = index._rehome(words_of[name])

    logger.debug("classified %d names: %d provisional, %d allowed categories",
                 len(unique), len(sizes), len(allowed))

    return CategoryIndex(
        assignments=assignments,
        frequencies=index.frequencies,
        majority=majority,
        anchors=anchors,
        allowed=allowed,
        stop_words=stop,
        min_cluster_size=min_cluster_size,
    )
