import threading
import time

import pytest

from inventory_tracker.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from inventory_tracker.repositories import MemoryRecordStore
from inventory_tracker.repositories.customer_repository import CustomerRepository
from inventory_tracker.services import customer_service as customer_module
from inventory_tracker.services.customer_service import CustomerService


def _service_with_usernames(usernames):
    records = [
        {'id': f'c{i}', 'firstName': 'X', 'lastName': 'Y', 'username': name}
        for i, name in enumerate(usernames)
    ]
    store = MemoryRecordStore({'customers': records})
    return CustomerService(store, CustomerRepository(store))


def test_suggestion_uses_first_and_last_name(customers):
    assert customers.suggest_username('Jane', 'Doe') == 'janedoe'

    customers.create_customer({'firstName': 'Jane', 'lastName': 'Doe', 'username': 'janedoe'})

    assert customers.suggest_username('Jane', 'Doe') == 'janedoe1'


def test_suggestion_is_case_insensitive_against_existing(customers):
    customers.create_customer({'firstName': 'Jane', 'lastName': 'Doe', 'username': 'JaneDoe'})
    assert customers.suggest_username('Jane', 'Doe') == 'janedoe1'


def test_suggestion_truncates_and_strips_symbols(customers):
    assert customers.suggest_username('Maximiliano', "O'Connor-Smith") == 'maximilioconnors'
    assert customers.suggest_username('Bartholomew-Alexander', '') == 'bartholomewalex'


def test_suggestion_counts_up_past_taken_suffixes():
    service = _service_with_usernames(['janedoe', 'janedoe1', 'janedoe2'])
    assert service.suggest_username('Jane', 'Doe') == 'janedoe3'


def test_suggestion_gives_up_after_max_suffix():
    taken = ['janedoe'] + [f'janedoe{i}' for i in range(1, 1001)]
    service = _service_with_usernames(taken)

    # the last attempt is returned even though it is taken
    assert service.suggest_username('Jane', 'Doe') == 'janedoe1000'


def test_suggestion_without_names_uses_random_customer(customers, monkeypatch):
    monkeypatch.setattr(customer_module.random, 'randint', lambda a, b: 42)
    assert customers.suggest_username() == 'customer42'
    assert customers.suggest_username('', 'Doe') == 'customer42'
    # nothing usable after normalization
    assert customers.suggest_username('***', None) == 'customer42'


def test_random_customer_gets_suffix_when_taken(monkeypatch):
    monkeypatch.setattr(customer_module.random, 'randint', lambda a, b: 42)
    service = _service_with_usernames(['customer42', 'customer421'])
    assert service.suggest_username() == 'customer422'


def test_create_requires_names_and_username(customers):
    with pytest.raises(ValidationError) as excinfo:
        customers.create_customer({'firstName': 'Jane', 'lastName': 'Doe', 'username': '  '})
    assert excinfo.value.field == 'username'

    with pytest.raises(ValidationError):
        customers.create_customer({'firstName': 'Jane', 'username': 'jane'})


def test_create_rejects_malformed_email(customers):
    with pytest.raises(ValidationError) as excinfo:
        customers.create_customer({
            'firstName': 'Jane', 'lastName': 'Doe', 'username': 'jane', 'email': 'not-an-email',
        })
    assert excinfo.value.field == 'email'


def test_duplicate_email_is_case_insensitive(customers):
    customers.create_customer({'firstName': 'A', 'lastName': 'One', 'username': 'a1', 'email': 'a@x.com'})

    with pytest.raises(DuplicateKeyError) as excinfo:
        customers.create_customer({'firstName': 'B', 'lastName': 'Two', 'username': 'b2', 'email': 'A@X.com'})

    assert excinfo.value.field == 'email'
    assert len(customers.get_all_customers()) == 1


def test_duplicate_username_is_case_insensitive(customers):
    customers.create_customer({'firstName': 'A', 'lastName': 'One', 'username': 'alpha'})

    with pytest.raises(DuplicateKeyError) as excinfo:
        customers.create_customer({'firstName': 'B', 'lastName': 'Two', 'username': 'ALPHA'})
    assert excinfo.value.field == 'username'


def test_customers_without_email_do_not_conflict(customers):
    customers.create_customer({'firstName': 'A', 'lastName': 'One', 'username': 'a1'})
    customers.create_customer({'firstName': 'B', 'lastName': 'Two', 'username': 'b2', 'email': ''})
    assert len(customers.get_all_customers()) == 2


def test_update_checks_uniqueness_against_others(customers):
    first = customers.create_customer({'firstName': 'A', 'lastName': 'One', 'username': 'a1', 'email': 'a@x.com'})
    second = customers.create_customer({'firstName': 'B', 'lastName': 'Two', 'username': 'b2'})

    # keeping its own values is not a conflict
    updated = customers.update_customer(first.id, {'username': 'A1', 'email': 'A@x.com'})
    assert updated.username == 'A1'

    with pytest.raises(DuplicateKeyError):
        customers.update_customer(second.id, {'email': 'a@X.COM'})
    with pytest.raises(DuplicateKeyError):
        customers.update_customer(second.id, {'username': 'a1'})

    assert customers.get_customer(second.id).email is None


def test_update_unknown_customer(customers):
    with pytest.raises(NotFoundError):
        customers.update_customer('missing', {'firstName': 'X'})


def test_delete_and_search(customers):
    jane = customers.create_customer({'firstName': 'Jane', 'lastName': 'Doe', 'username': 'jdoe', 'email': 'jane@shop.com'})
    customers.create_customer({'firstName': 'Mark', 'lastName': 'Roe', 'username': 'mroe'})

    assert [c.id for c in customers.search_customers('SHOP')] == [jane.id]
    assert [c.id for c in customers.search_customers('doe')] == [jane.id]
    assert len(customers.search_customers('')) == 2

    assert customers.delete_customer(jane.id) is True
    assert customers.delete_customer(jane.id) is False
    assert customers.get_customer(jane.id) is None


def test_concurrent_creates_with_same_username_store_one(container, customers, monkeypatch):
    repo = container.customer_repo
    original_load = repo.load

    def slow_load():
        records = original_load()
        # widen the gap between the uniqueness check and the write
        time.sleep(0.05)
        return records

    monkeypatch.setattr(repo, 'load', slow_load)

    start = threading.Barrier(2)
    errors = []

    def create(first_name):
        start.wait()
        try:
            customers.create_customer({'firstName': first_name, 'lastName': 'Doe', 'username': 'jdoe'})
        except DuplicateKeyError as exc:
            errors.append(exc)

    workers = [threading.Thread(target=create, args=(name,)) for name in ('Jane', 'John')]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert len(errors) == 1
    assert [c.username for c in original_load()] == ['jdoe']
