import json

import yaml

from tikeyctl.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, data: dict) -> str:
        return json.dumps(data, indent=2, sort_keys=False, ensure_ascii=False)


class YamlRenderer(Renderer):
    def render(self, data: dict) -> str:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")


class TextRenderer(Renderer):
    """
    Plain operator output, one fact per line:

        format: table_row
        table_id: 1935
        row_id: 539578

    Payloads are routed on their ``format`` entry. Anything without a known
    format is printed as ``key: value`` lines.
    """

    def render(self, data: dict) -> str:
        match data.get("format"):
            case "table_row":
                lines = self._table_row(data)
            case "table_index":
                lines = self._table_index(data)
            case "index_value":
                lines = ["format: index_value", *self._index_values(data["index_values"])]
            case "table_row_value":
                lines = [self._column(col) for col in data["columns"]]
            case "key_ranges":
                lines = self._key_ranges(data)
            case _:
                lines = self._plain(data)
        return "\n".join(lines)

    @staticmethod
    def _table_row(data: dict) -> list[str]:
        return [
            "format: table_row",
            f"table_id: {data['table_id']}",
            f"row_id: {data['row_id']}",
        ]

    def _table_index(self, data: dict) -> list[str]:
        return [
            "format: table_index",
            f"table_id: {data['table_id']}",
            f"index_id: {data['index_id']}",
            *self._index_values(data["index_values"]),
        ]

    @staticmethod
    def _index_values(values: list[dict]) -> list[str]:
        return [
            f"index_value[{i}]: {{type: {v['type']}, value: {v['value']}}}"
            for i, v in enumerate(values)
        ]

    @staticmethod
    def _column(col: dict) -> str:
        name = col["name"]
        match col["status"]:
            case "null":
                return f"{name} is NULL"
            case "not_found":
                return f"{name} not found in data"
            case "error":
                return f"{name} ToString error: {col['error']} datum: {col['value']}"
            case _:
                return f"{name}:\t{col['value']}"

    @staticmethod
    def _key_ranges(data: dict) -> list[str]:
        lines = ["global ranges:"]
        for r in data["global"]:
            lines.append(f"{'  ' * r['depth']}{r['name']}: ({r['start']}, {r['end']})")

        if "table" in data:
            lines.append(f"table {data['table']} ranges: (NOTE: key range might be changed after DDL)")
            for r in data["table_ranges"]:
                lines.append(f"{'  ' * r['depth']}{r['name']}: ({r['start']}, {r['end']})")
        return lines

    @staticmethod
    def _plain(data: dict) -> list[str]:
        lines = []
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                lines.append(f"{key}:")
                lines.extend(f"  - {item}" for item in value)
            else:
                lines.append(f"{key}: {value}")
        return lines


RENDERERS: dict[str, type[Renderer]] = {
    "text": TextRenderer,
    "yaml": YamlRenderer,
    "json": JsonRenderer,
}
