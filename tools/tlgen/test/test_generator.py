"""Tests for the generator orchestration."""

import pytest

from tools.tlgen.config import LAYOUT_SPLIT, GeneratorConfig
from tools.tlgen.generator import generate, group_types, summarize
from tools.tlgen.parser import MalformedSchema
from tools.tlgen.types import UnresolvedType


def paths(files):
    return [f.relative_path for f in files]


def by_path(files):
    return {f.relative_path: f.content for f in files}


class TestGrouping:
    def test_groups_sorted(self, chat_schema):
        groups = group_types(chat_schema)
        assert list(groups) == ["Chat", "ChatLists", "ChatPhotoInfo", "ChatType"]
        assert [c.name for c in groups["ChatType"]] == [
            "chatTypePrivate", "chatTypeBasicGroup", "chatTypeSecret"]


class TestCategorized:
    def test_paths(self, chat_tl):
        files = generate(chat_tl, GeneratorConfig(min_cluster_size=3))
        assert paths(files) == [
            "chat/Chat.kt",
            "chat/ChatLists.kt",
            "chat/ChatListsMapper.kt",
            "chat/ChatMapper.kt",
            "chat/ChatPhotoInfo.kt",
            "chat/ChatPhotoInfoMapper.kt",
            "chat/ChatType.kt",
            "chat/ChatTypeMapper.kt",
        ]

    def test_small_schema_lands_in_misc(self, chat_tl):
        files = generate(chat_tl, GeneratorConfig())
        assert summarize(files) == {"misc": 8}

    def test_package_follows_category(self, chat_tl):
        files = by_path(generate(chat_tl, GeneratorConfig(min_cluster_size=3)))
        assert "package com.example.tdlib.chat\n" in files["chat/Chat.kt"]

    def test_cross_category_imports(self, chat_tl):
        files = by_path(generate(chat_tl, GeneratorConfig(min_cluster_size=1)))
        assert "media/ChatPhotoInfo.kt" in files
        assert "import com.example.tdlib.media.ChatPhotoInfo\n" in files["chat/Chat.kt"]
        assert "import com.example.tdlib.media.toModel\n" in files["chat/ChatMapper.kt"]

    def test_same_category_not_imported(self, chat_tl):
        files = by_path(generate(chat_tl, GeneratorConfig(min_cluster_size=3)))
        assert "import com.example.tdlib.chat" not in files["chat/Chat.kt"]

    def test_anchor_override(self, chat_tl):
        config = GeneratorConfig(min_cluster_size=1, anchors={"Photo": "images"})
        assert "images/ChatPhotoInfo.kt" in paths(generate(chat_tl, config))

    def test_functions_not_emitted(self, chat_tl):
        assert not any("GetChat" in p for p in paths(generate(chat_tl, GeneratorConfig())))

    def test_no_mappers(self, chat_tl):
        files = generate(chat_tl, GeneratorConfig(min_cluster_size=3, emit_mappers=False))
        assert len(files) == 4
        assert not any(p.endswith("Mapper.kt") for p in paths(files))

    def test_summary(self, chat_tl):
        files = generate(chat_tl, GeneratorConfig(min_cluster_size=3))
        assert summarize(files) == {"chat": 8}


class TestSplitLayout:
    def test_directories(self, chat_tl):
        files = generate(chat_tl, GeneratorConfig(layout=LAYOUT_SPLIT))
        assert summarize(files) == {"domain": 4, "mapping": 4}

    def test_mapper_imports_domain(self, chat_tl):
        files = by_path(generate(chat_tl, GeneratorConfig(layout=LAYOUT_SPLIT)))
        mapper = files["mapping/ChatMapper.kt"]
        assert "package com.example.tdlib.mapping\n" in mapper
        assert "import com.example.tdlib.domain.Chat\n" in mapper
        assert "package com.example.tdlib.domain\n" in files["domain/Chat.kt"]


class TestGenerate:
    def test_idempotent(self, chat_tl):
        config = GeneratorConfig(min_cluster_size=3)
        assert generate(chat_tl, config) == generate(chat_tl, config)

    def test_nested_vectors(self):
        text = "//@description A grid @cells Cells\ngrid cells:vector<vector<int32>> = Grid;\n"
        files = by_path(generate(text, GeneratorConfig(min_cluster_size=1)))
        assert "    public val cells: List<List<Int>>\n" in files["grid/Grid.kt"]
        assert "    cells = cells.map { v0 -> v0.toList() }\n" in files["grid/GridMapper.kt"]

    def test_malformed_schema(self):
        with pytest.raises(MalformedSchema):
            generate("foo x:int32 = Foo\n", GeneratorConfig())

    def test_unresolved_field_type(self):
        with pytest.raises(UnresolvedType):
            generate("//@description d\nfoo x:vector<int32 = Foo;\n", GeneratorConfig())

    def test_empty_schema(self):
        assert generate("", GeneratorConfig()) == []
