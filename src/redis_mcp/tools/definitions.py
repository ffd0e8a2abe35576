"""The Redis tool table.

Every tool exposed over MCP is declared here exactly once: its fields,
the Redis command it maps to, and the rule that turns the Redis reply
into text. Absent keys and empty ranges render as messages, never
as errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis_mcp.tools.base import FieldSpec, FieldType, ToolDefinition
from redis_mcp.tools.registry import SchemaRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from redis_mcp.tools.base import Command, ValidatedArguments
    from redis_mcp.tools.normalize import Items


def _num(value: float) -> int | float:
    """Send integral floats as integers (``10.0`` -> ``10``)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _format_score(value: Any) -> str:
    score = float(value)
    # Large magnitudes keep exponent form (1e+20), as Redis prints them.
    if score.is_integer() and abs(score) < 2**53:
        return str(int(score))
    return repr(score)


def _pairs(reply: Any) -> list[tuple[Any, Any]]:
    """Flatten map-like replies (dict, pair list, flat list) into pairs."""
    if isinstance(reply, dict):
        return list(reply.items())
    items = list(reply)
    if items and all(isinstance(i, list | tuple) and len(i) == 2 for i in items):
        return [(i[0], i[1]) for i in items]
    return list(zip(items[::2], items[1::2], strict=True))


def _lines(values: list[Any]) -> str:
    return "\n".join(str(v) for v in values)


def _key(description: str = "Redis key") -> FieldSpec:
    return FieldSpec("key", FieldType.STRING, description)


# ─── Strings & keys ───────────────────────────────────────────


def _build_set(args: ValidatedArguments) -> Command:
    if args["expireSeconds"]:
        return ("SETEX", args["key"], _num(args["expireSeconds"]), args["value"])
    return ("SET", args["key"], args["value"])


def _render_set(args: ValidatedArguments, reply: Any) -> str:
    return f"Successfully set key: {args['key']}"


def _render_get(args: ValidatedArguments, reply: Any) -> str:
    if reply is None:
        return f"Key not found: {args['key']}"
    return f"{reply}"


def _build_delete(args: ValidatedArguments) -> Command:
    keys: Items = args["key"]
    return ("DEL", *keys)


def _render_delete(args: ValidatedArguments, reply: Any) -> str:
    keys: Items = args["key"]
    if keys.is_sequence:
        return f"Successfully deleted {len(keys)} keys"
    return f"Successfully deleted key: {keys.values[0]}"


def _render_list(args: ValidatedArguments, reply: Any) -> str:
    keys = list(reply)
    if not keys:
        return "No keys found matching pattern"
    return f"Found keys:\n{_lines(keys)}"


def _render_incr(args: ValidatedArguments, reply: Any) -> str:
    return f"Incremented key: {args['key']}, new value: {reply}"


def _render_expire(args: ValidatedArguments, reply: Any) -> str:
    if reply:
        return (
            f"Successfully set expiration of {_num(args['seconds'])} seconds "
            f"for key: {args['key']}"
        )
    return f"Failed to set expiration: key {args['key']} does not exist"


# ─── Hashes ───────────────────────────────────────────────────


def _render_hset(args: ValidatedArguments, reply: Any) -> str:
    return f"Successfully set hash field {args['field']} in key: {args['key']}"


def _render_hget(args: ValidatedArguments, reply: Any) -> str:
    if reply is None:
        return f"Field {args['field']} not found in hash key: {args['key']}"
    return f"{reply}"


def _render_hgetall(args: ValidatedArguments, reply: Any) -> str:
    pairs = _pairs(reply) if reply else []
    if not pairs:
        return f"Hash key not found or empty: {args['key']}"
    return "\n".join(f"{field}: {value}" for field, value in pairs)


# ─── Lists ────────────────────────────────────────────────────


def _push_renderer(end: str) -> Callable[[ValidatedArguments, Any], str]:
    def render(args: ValidatedArguments, reply: Any) -> str:
        values: Items = args["value"]
        if values.is_sequence:
            pushed = f"{len(values)} values"
        else:
            pushed = "value"
        return (
            f"Successfully pushed {pushed} to the {end} of list {args['key']}, "
            f"new length: {reply}"
        )

    return render


def _render_pop(args: ValidatedArguments, reply: Any) -> str:
    if reply is None:
        return f"List is empty or does not exist: {args['key']}"
    return f"{reply}"


def _render_lrange(args: ValidatedArguments, reply: Any) -> str:
    elements = list(reply)
    if not elements:
        return f"No elements in range or list does not exist: {args['key']}"
    return _lines(elements)


# ─── Sorted sets ──────────────────────────────────────────────


def _render_zadd(args: ValidatedArguments, reply: Any) -> str:
    return f"Added to sorted set {args['key']}, new members: {reply}"


def _build_zrange(args: ValidatedArguments) -> Command:
    command: Command = ("ZRANGE", args["key"], _num(args["min"]), _num(args["max"]))
    if args["withScores"]:
        return (*command, "WITHSCORES")
    return command


def _render_zrange(args: ValidatedArguments, reply: Any) -> str:
    members = list(reply) if reply else []
    if not members:
        return f"No members in range or sorted set does not exist: {args['key']}"
    if args["withScores"]:
        return "\n".join(f"{m}: {_format_score(s)}" for m, s in _pairs(members))
    return _lines(members)


def _render_zrem(args: ValidatedArguments, reply: Any) -> str:
    members: Items = args["member"]
    if members.is_sequence:
        return f"Removed {reply} of {len(members)} members from sorted set: {args['key']}"
    if reply:
        return f"Removed member {members.values[0]} from sorted set: {args['key']}"
    return f"Member {members.values[0]} not found in sorted set: {args['key']}"


def _render_zscore(args: ValidatedArguments, reply: Any) -> str:
    if reply is None:
        return f"Member not found in sorted set: {args['key']}"
    return _format_score(reply)


def _render_zrank(args: ValidatedArguments, reply: Any) -> str:
    if reply is None:
        return f"Member not found in sorted set: {args['key']}"
    return f"{reply}"


# ─── Pub/Sub ──────────────────────────────────────────────────


def _render_publish(args: ValidatedArguments, reply: Any) -> str:
    return (
        f"Message published to channel {args['channel']}, "
        f"received by {reply} subscribers"
    )


def _render_pubsub_channels(args: ValidatedArguments, reply: Any) -> str:
    channels = list(reply)
    if not channels:
        pattern = args["pattern"]
        suffix = f" matching pattern {pattern}" if pattern else ""
        return f"No active channels found{suffix}"
    return f"Active channels:\n{_lines(channels)}"


# ─── Table ────────────────────────────────────────────────────


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="set",
        description="Set a Redis key-value pair with optional expiration",
        fields=(
            _key(),
            FieldSpec("value", FieldType.STRING, "Value to store"),
            FieldSpec(
                "expireSeconds",
                FieldType.NUMBER,
                "Optional expiration time in seconds",
                required=False,
            ),
        ),
        build=_build_set,
        render=_render_set,
    ),
    ToolDefinition(
        name="get",
        description="Get value by key from Redis",
        fields=(_key("Redis key to retrieve"),),
        build=lambda a: ("GET", a["key"]),
        render=_render_get,
    ),
    ToolDefinition(
        name="delete",
        description="Delete one or more keys from Redis",
        fields=(
            FieldSpec("key", FieldType.STRING_OR_ARRAY, "Key or array of keys to delete"),
        ),
        build=_build_delete,
        render=_render_delete,
    ),
    ToolDefinition(
        name="list",
        description="List Redis keys matching a pattern",
        fields=(
            FieldSpec(
                "pattern",
                FieldType.STRING,
                "Pattern to match keys (default: *)",
                required=False,
                default="*",
            ),
        ),
        build=lambda a: ("KEYS", a["pattern"]),
        render=_render_list,
    ),
    ToolDefinition(
        name="hset",
        description="Set field in a hash stored at key to value",
        fields=(
            _key("Redis hash key"),
            FieldSpec("field", FieldType.STRING, "Hash field name"),
            FieldSpec("value", FieldType.STRING, "Value to store"),
        ),
        build=lambda a: ("HSET", a["key"], a["field"], a["value"]),
        render=_render_hset,
    ),
    ToolDefinition(
        name="hget",
        description="Get the value of a hash field stored at key",
        fields=(
            _key("Redis hash key"),
            FieldSpec("field", FieldType.STRING, "Hash field name to retrieve"),
        ),
        build=lambda a: ("HGET", a["key"], a["field"]),
        render=_render_hget,
    ),
    ToolDefinition(
        name="hgetall",
        description="Get all fields and values in a hash",
        fields=(_key("Redis hash key"),),
        build=lambda a: ("HGETALL", a["key"]),
        render=_render_hgetall,
    ),
    ToolDefinition(
        name="incr",
        description="Increment the integer value of a key by one",
        fields=(_key("Redis key to increment"),),
        build=lambda a: ("INCR", a["key"]),
        render=_render_incr,
    ),
    ToolDefinition(
        name="expire",
        description="Set a key's time to live in seconds",
        fields=(
            _key(),
            FieldSpec("seconds", FieldType.NUMBER, "Expiration time in seconds"),
        ),
        build=lambda a: ("EXPIRE", a["key"], _num(a["seconds"])),
        render=_render_expire,
    ),
    ToolDefinition(
        name="lpush",
        description="Insert one or multiple values at the beginning of a list",
        fields=(
            _key("Redis list key"),
            FieldSpec(
                "value",
                FieldType.STRING_OR_ARRAY,
                "Value or array of values to push to the list",
            ),
        ),
        build=lambda a: ("LPUSH", a["key"], *a["value"]),
        render=_push_renderer("head"),
    ),
    ToolDefinition(
        name="rpush",
        description="Insert one or multiple values at the end of a list",
        fields=(
            _key("Redis list key"),
            FieldSpec(
                "value",
                FieldType.STRING_OR_ARRAY,
                "Value or array of values to push to the list",
            ),
        ),
        build=lambda a: ("RPUSH", a["key"], *a["value"]),
        render=_push_renderer("tail"),
    ),
    ToolDefinition(
        name="lpop",
        description="Remove and get the first element in a list",
        fields=(_key("Redis list key"),),
        build=lambda a: ("LPOP", a["key"]),
        render=_render_pop,
    ),
    ToolDefinition(
        name="rpop",
        description="Remove and get the last element in a list",
        fields=(_key("Redis list key"),),
        build=lambda a: ("RPOP", a["key"]),
        render=_render_pop,
    ),
    ToolDefinition(
        name="lrange",
        description="Get a range of elements from a list",
        fields=(
            _key("Redis list key"),
            FieldSpec("start", FieldType.NUMBER, "Start index (0-based)"),
            FieldSpec("stop", FieldType.NUMBER, "Stop index (inclusive)"),
        ),
        build=lambda a: ("LRANGE", a["key"], _num(a["start"]), _num(a["stop"])),
        render=_render_lrange,
    ),
    ToolDefinition(
        name="zadd",
        description="Add a member with a score to a sorted set",
        fields=(
            _key("Redis sorted set key"),
            FieldSpec("score", FieldType.NUMBER, "Score of the member"),
            FieldSpec("member", FieldType.STRING, "Member to add"),
        ),
        build=lambda a: ("ZADD", a["key"], _num(a["score"]), a["member"]),
        render=_render_zadd,
    ),
    ToolDefinition(
        name="zrange",
        description="Return a range of members in a sorted set by index",
        fields=(
            _key("Redis sorted set key"),
            FieldSpec("min", FieldType.NUMBER, "Start index (0-based)"),
            FieldSpec("max", FieldType.NUMBER, "Stop index (inclusive)"),
            FieldSpec(
                "withScores",
                FieldType.BOOLEAN,
                "Include member scores in the result",
                required=False,
                default=False,
            ),
        ),
        build=_build_zrange,
        render=_render_zrange,
    ),
    ToolDefinition(
        name="zrem",
        description="Remove one or more members from a sorted set",
        fields=(
            _key("Redis sorted set key"),
            FieldSpec(
                "member",
                FieldType.STRING_OR_ARRAY,
                "Member or array of members to remove",
            ),
        ),
        build=lambda a: ("ZREM", a["key"], *a["member"]),
        render=_render_zrem,
    ),
    ToolDefinition(
        name="zscore",
        description="Get the score of a member in a sorted set",
        fields=(
            _key("Redis sorted set key"),
            FieldSpec("member", FieldType.STRING, "Member to look up"),
        ),
        build=lambda a: ("ZSCORE", a["key"], a["member"]),
        render=_render_zscore,
    ),
    ToolDefinition(
        name="zrank",
        description="Get the rank of a member in a sorted set (0-based)",
        fields=(
            _key("Redis sorted set key"),
            FieldSpec("member", FieldType.STRING, "Member to look up"),
        ),
        build=lambda a: ("ZRANK", a["key"], a["member"]),
        render=_render_zrank,
    ),
    ToolDefinition(
        name="publish",
        description="Publish a message to a channel",
        fields=(
            FieldSpec("channel", FieldType.STRING, "Channel to publish to"),
            FieldSpec("message", FieldType.STRING, "Message to publish"),
        ),
        build=lambda a: ("PUBLISH", a["channel"], a["message"]),
        render=_render_publish,
    ),
    ToolDefinition(
        name="pubsub_channels",
        description="List active channels (with at least one subscriber)",
        fields=(
            FieldSpec(
                "pattern",
                FieldType.STRING,
                "Pattern to filter channels (optional)",
                required=False,
            ),
        ),
        build=lambda a: ("PUBSUB", "CHANNELS", a["pattern"] or "*"),
        render=_render_pubsub_channels,
    ),
)


def build_registry() -> SchemaRegistry:
    """Registry holding every Redis tool, in table order."""
    return SchemaRegistry(TOOL_DEFINITIONS)
