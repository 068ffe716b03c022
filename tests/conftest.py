# Ensure project root is on sys.path so `import src.rndc_admin...` works when running tests in various environments.
import os
import sys
import tempfile
from unittest.mock import MagicMock

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
# Datos de pruebas aislados (log y almacenamiento local)
os.environ.setdefault("RNDC_DATA_DIR", tempfile.mkdtemp(prefix="rndc_test_"))

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pytest

from src.rndc_admin.db import make_engine, make_session_factory
from src.rndc_admin.schemas import GastoTotals, ParticipantsReport, UsersTotalReport
from src.rndc_admin.services.api_client import Result
from src.rndc_admin.session import AuthSession, SessionStore
from src.rndc_admin.storage import LocalStorage


class ImmediateRunner:
    """TaskRunner síncrono: el callback se ejecuta en el acto."""

    def __init__(self):
        self.calls = 0

    def submit(self, fn, callback):
        self.calls += 1
        callback(fn())

    def gather(self, fns, callback):
        callback({key: fn() for key, fn in fns.items()})

    def wait(self, msecs=5000):
        return True


class DeferredRunner(ImmediateRunner):
    """Guarda las tareas y las ejecuta al llamar ``flush`` (en el orden pedido)."""

    def __init__(self):
        super().__init__()
        self.pending = []

    def submit(self, fn, callback):
        self.calls += 1
        self.pending.append((fn, callback))

    def gather(self, fns, callback):
        self.pending.append((lambda: {k: f() for k, f in fns.items()}, callback))

    def run(self, index):
        fn, callback = self.pending.pop(index)
        callback(fn())

    def flush(self):
        while self.pending:
            self.run(0)


def make_fake_api():
    """API falsa con respuestas vacías por defecto; cada test ajusta lo que necesita."""
    api = MagicMock()
    ok_empty = Result.success([])
    ok_none = Result.success(None)
    for resource in ("conferences", "users", "regions", "participations", "payments"):
        group = getattr(api, resource)
        group.list.return_value = ok_empty
        group.create.return_value = ok_none
        group.update.return_value = ok_none
        group.delete.return_value = ok_none
    api.users.search.return_value = ok_empty
    api.payments.missing_next_conference.return_value = ok_empty
    api.participations.export_csv.return_value = Result.success("")
    api.reports.users_total.return_value = Result.success(UsersTotalReport(total_general=0))
    api.reports.participants.return_value = Result.success(
        ParticipantsReport(total_participantes_unicos=0, total_participaciones=0)
    )
    inv = api.investors
    inv.list.return_value = ok_empty
    inv.list_payments.return_value = ok_empty
    inv.list_types.return_value = ok_empty
    for name in ("create", "update", "delete", "create_payment", "delete_payment", "create_type", "delete_type"):
        getattr(inv, name).return_value = ok_none
    api.expenses.list.return_value = ok_empty
    api.expenses.totals.return_value = Result.success(GastoTotals())
    api.expenses.create.return_value = ok_none
    api.expenses.delete.return_value = ok_none
    return api


@pytest.fixture
def storage():
    return LocalStorage(make_session_factory(make_engine(":memory:")))


@pytest.fixture
def session_store(storage):
    return SessionStore(storage)


@pytest.fixture
def runner():
    return ImmediateRunner()


@pytest.fixture
def fake_api():
    return make_fake_api()


@pytest.fixture
def admin_session():
    return AuthSession(dni="11111111", nombres="Ana Admin", rol="Admin", nombre_region="Lima", token="tok-admin")


@pytest.fixture
def encargado_session():
    return AuthSession(dni="22222222", nombres="Eli Encargado", rol="Encargado", nombre_region="Cusco",
                       token="tok-enc")
