from core.constants import ColumnType


def flatten_columns(columns, prefix='', display_prefix=''):
    """Flatten nested group columns into the names submission data is keyed by"""
    flat_columns = []
    for column in columns:
        name = f"{prefix}{column['name']}"
        display_name = column.get('display_name') or column['name']
        if display_prefix:
            display_name = f"{display_prefix} - {display_name}"

        if column.get('type') == ColumnType.GROUP:
            flat_columns.extend(
                flatten_columns(column.get('columns', []), f"{name}_", display_name)
            )
        else:
            flat_columns.append({
                **column,
                'name': name,
                'display_name': display_name,
            })
    return flat_columns


def build_sections(metadata, data_rows):
    """
    Lay submission rows out against the template's sections.

    Sections the template declares are always listed; rows pointing at
    sections the template does not declare keep their own keys as columns.
    """
    metadata = metadata or []
    indices = sorted(set(range(len(metadata))) | {row['section_index'] for row in data_rows})

    sections = []
    for index in indices:
        section = metadata[index] if index < len(metadata) else {}
        rows = sorted(
            (row for row in data_rows if row['section_index'] == index),
            key=lambda row: row.get('row_number', 0),
        )

        columns = flatten_columns(section.get('columns', []))
        if not columns and rows:
            columns = [{'name': key, 'display_name': key} for key in rows[0]['data']]

        headers = section.get('headers') or []
        sections.append({
            'index': index,
            'title': headers[0] if headers else f"Section {index + 1}",
            'headers': headers,
            'columns': columns,
            'rows': [
                [row['data'].get(column['name']) for column in columns]
                for row in rows
            ],
        })
    return sections
