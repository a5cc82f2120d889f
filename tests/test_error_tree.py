import logging

from app.domain.error_tree import ValidationIssue, build_form_error_map, issues_from_form_errors


def test_single_segment_paths_accumulate_in_order():
    issues = [
        ValidationIssue(path=('name',), message='Name is too short.'),
        ValidationIssue(path=('type',), message='Select a property type.'),
        ValidationIssue(path=('name',), message='Name has invalid characters.'),
    ]

    assert build_form_error_map(issues) == {
        'name': ['Name is too short.', 'Name has invalid characters.'],
        'type': ['Select a property type.'],
    }


def test_two_segment_paths_are_grouped():
    issues = [
        {'path': ['rates', 'nightly'], 'message': 'Nightly rate must be at least $200.'},
        {'path': ['rates', 'weekly'], 'message': 'Weekly rate must be at least $1000.'},
        {'path': ['location', 'zipcode'], 'message': 'Invalid ZIP code format.'},
    ]

    tree = build_form_error_map(issues)

    assert tree == {
        'rates': {
            'nightly': ['Nightly rate must be at least $200.'],
            'weekly': ['Weekly rate must be at least $1000.'],
        },
        'location': {'zipcode': ['Invalid ZIP code format.']},
    }


def test_two_segment_path_with_empty_field_creates_empty_group():
    tree = build_form_error_map([{'path': ['sellerInfo', ''], 'message': 'Seller is incomplete.'}])

    assert tree == {'sellerInfo': {}}


def test_integer_field_segment_is_kept():
    tree = build_form_error_map([{'path': ['amenities', 0], 'message': 'Unknown amenity.'}])

    assert tree == {'amenities': {'0': ['Unknown amenity.']}}


def test_deep_paths_are_flattened():
    issues = [
        {'path': ['location', 'geo', 'lat'], 'message': 'Latitude is required.'},
        {'path': ['images', 2, 'size'], 'message': 'Image is too large.'},
    ]

    assert build_form_error_map(issues) == {
        'location.geo.lat': ['Latitude is required.'],
        'images.2.size': ['Image is too large.'],
    }


def test_none_input_returns_empty_tree(caplog):
    with caplog.at_level(logging.WARNING, logger='app.domain.error_tree'):
        assert build_form_error_map(None) == {}
    assert 'is None' in caplog.text


def test_non_sequence_input_returns_empty_tree(caplog):
    with caplog.at_level(logging.WARNING, logger='app.domain.error_tree'):
        assert build_form_error_map({'path': ['name'], 'message': 'x'}) == {}
        assert build_form_error_map('name: too short') == {}
        assert build_form_error_map(42) == {}
    assert caplog.text.count('not a list') == 3


def test_exception_while_iterating_aborts_batch(caplog):
    class ExplodingList(list):
        def __iter__(self):
            yield {'path': ['name'], 'message': 'Name is too short.'}
            raise RuntimeError('boom')

    with caplog.at_level(logging.ERROR, logger='app.domain.error_tree'):
        assert build_form_error_map(ExplodingList()) == {}
    assert 'error processing issues' in caplog.text


def test_malformed_items_are_skipped(caplog):
    issues = [
        None,
        'name: too short',
        {'message': 'No path.'},
        {'path': 'name', 'message': 'Path is a string.'},
        {'path': ['name']},
        {'path': ['name'], 'message': ''},
        {'path': ['name'], 'message': 42},
        {'path': [], 'message': 'Empty path.'},
        {'path': ['beds'], 'message': 'Property must have at least one bed.'},
    ]

    with caplog.at_level(logging.WARNING, logger='app.domain.error_tree'):
        tree = build_form_error_map(issues)

    assert tree == {'beds': ['Property must have at least one bed.']}
    assert 'skipping invalid issue object' in caplog.text
    assert 'missing valid path list' in caplog.text
    assert 'missing valid message string' in caplog.text


def test_unprintable_path_segment_skips_only_that_item(caplog):
    class Unprintable:
        def __str__(self):
            raise ValueError('cannot render')

    issues = [
        {'path': [Unprintable(), 'geo', 'lat'], 'message': 'Latitude is required.'},
        {'path': ['name'], 'message': 'Name is too short.'},
    ]

    with caplog.at_level(logging.WARNING, logger='app.domain.error_tree'):
        tree = build_form_error_map(issues)

    assert tree == {'name': ['Name is too short.']}
    assert 'error processing issue path' in caplog.text


def test_leaf_and_group_collisions_do_not_overwrite():
    issues = [
        {'path': ['rates'], 'message': 'At least one rate must be provided.'},
        {'path': ['rates', 'nightly'], 'message': 'Nightly rate must be at least $200.'},
        {'path': ['location', 'city'], 'message': 'City is too short.'},
        {'path': ['location'], 'message': 'Location is required.'},
    ]

    assert build_form_error_map(issues) == {
        'rates': ['At least one rate must be provided.'],
        'location': {'city': ['City is too short.']},
    }


def test_issues_from_form_errors_flattens_nested_and_form_level_errors():
    errors = {
        'name': ['Name must be at least 10 characters long.'],
        'location': {'zipcode': ['Invalid ZIP code format.']},
        'rates': {None: ['At least one rate must be provided.']},
    }

    issues = issues_from_form_errors(errors)

    assert ValidationIssue(('name',), 'Name must be at least 10 characters long.') in issues
    assert ValidationIssue(('location', 'zipcode'), 'Invalid ZIP code format.') in issues
    assert ValidationIssue(('rates',), 'At least one rate must be provided.') in issues
    assert build_form_error_map(issues) == {
        'name': ['Name must be at least 10 characters long.'],
        'location': {'zipcode': ['Invalid ZIP code format.']},
        'rates': ['At least one rate must be provided.'],
    }


def test_issues_from_form_errors_indexes_list_entries():
    errors = {'amenities': [[], ['Unknown amenity.']]}

    assert issues_from_form_errors(errors) == [ValidationIssue(('amenities', 1), 'Unknown amenity.')]
