from __future__ import annotations

import asyncio


def test_mcp_tools_basic_flow(bound_database, kv_env):
    async def _run():
        import endpoints.mcp_endpoints as mcp

        r = await mcp.kv_set("xixi", "haha")
        assert r["structuredContent"] == {"key": "xixi", "value": "haha"}

        r2 = await mcp.kv_get("xixi")
        assert r2["structuredContent"]["found"] is True
        assert r2["content"][0]["text"] == "haha"

        r3 = await mcp.kv_flush()
        assert r3["structuredContent"] == {"flushed": True}
        assert kv_env.read_bytes() == b'{"xixi":"haha"}\n'

        r4 = await mcp.kv_delete("xixi")
        assert r4["structuredContent"]["deleted"] is True

        r5 = await mcp.kv_get("xixi")
        assert r5["structuredContent"] == {"key": "xixi", "found": False}

        r6 = await mcp.kv_delete("xixi")
        assert r6["structuredContent"]["deleted"] is False
        assert "was not set" in r6["content"][0]["text"]

    asyncio.run(_run())


def test_mcp_tools_accept_empty_key_and_empty_value(bound_database):
    async def _run():
        import endpoints.mcp_endpoints as mcp

        r = await mcp.kv_set("", "")
        assert r["structuredContent"] == {"key": "", "value": ""}
        assert bound_database.get("") == ""

        r2 = await mcp.kv_get("")
        assert r2["structuredContent"]["found"] is True
        assert r2["content"] == [{"type": "text", "text": ""}]

    asyncio.run(_run())


def test_mcp_set_rejects_unencodable_value(bound_database, kv_env):
    async def _run():
        import endpoints.mcp_endpoints as mcp

        await mcp.kv_set("good", "keep-me")
        r = await mcp.kv_set("bad", "\ud800")
        assert r["content"][0]["text"].startswith("Invalid input")
        assert r["structuredContent"] == {}
        assert bound_database.get("bad") is None

        r2 = await mcp.kv_flush()
        assert r2["structuredContent"] == {"flushed": True}
        assert kv_env.read_bytes() == b'{"good":"keep-me"}\n'

    asyncio.run(_run())
