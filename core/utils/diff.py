from deepdiff import DeepDiff


def describe_changes(previous_state, new_state):
    """List the changes between two JSON documents as changed/added/removed entries"""
    diff = DeepDiff(previous_state, new_state, ignore_order=True)

    changes = []

    for path, change in diff.get('values_changed', {}).items():
        changes.append({
            'type': 'changed',
            'path': format_path(path),
            'old_value': change['old_value'],
            'new_value': change['new_value'],
        })

    for path, change in diff.get('type_changes', {}).items():
        changes.append({
            'type': 'changed',
            'path': format_path(path),
            'old_value': change['old_value'],
            'new_value': change['new_value'],
        })

    for key in ('dictionary_item_added', 'iterable_item_added'):
        for path in diff.get(key, []):
            changes.append({
                'type': 'added',
                'path': format_path(path),
            })

    for key in ('dictionary_item_removed', 'iterable_item_removed'):
        for path in diff.get(key, []):
            changes.append({
                'type': 'removed',
                'path': format_path(path),
            })

    return changes


def format_path(path):
    """Turn DeepDiff's root['a'][0]['b'] into a.0.b"""
    path = path.replace('root', '', 1)
    parts = [part.strip("'\"") for part in path.strip('[]').split('][')]
    return '.'.join(part for part in parts if part)
