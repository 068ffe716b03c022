"""Operaciones de la API agrupadas por recurso.

Cada método devuelve ``Result`` con los DTOs de ``schemas`` ya construidos.
"""
from __future__ import annotations

from typing import Any, Callable

from ..schemas import (
    Conference,
    ConferenceFinancialReport,
    ConferenceRequest,
    Gasto,
    GastoRequest,
    GastoTotals,
    Inversor,
    InversorRequest,
    MissingPayment,
    PagoInversor,
    PagoInversorRequest,
    ParticipantsReport,
    Participation,
    ParticipationRequest,
    Payment,
    PaymentRequest,
    Region,
    ReporteGastosIngresos,
    ReporteGeneral,
    ReporteInversor,
    Tipo,
    User,
    UserRequest,
    UsersTotalReport,
)
from ..session import ALLOWED_ROLES, AuthSession
from .api_client import ApiClient, ApiError, ErrorKind, Result


def _list_of(factory: Callable[[dict], Any]) -> Callable[[Any], list]:
    def convert(data: Any) -> list:
        if not isinstance(data, list):
            raise TypeError("se esperaba una lista")
        return [factory(item) for item in data]
    return convert


class _Resource:
    def __init__(self, client: ApiClient) -> None:
        self._client = client


class AuthResource(_Resource):
    def login(self, dni: str, password: str) -> Result[AuthSession]:
        res = self._client.post(
            "/Auth/login",
            json={"dni": dni, "password": password},
            message="Error de servidor",
            status_messages={401: "Credenciales inválidas"},
        )
        if not res.ok:
            return res
        session = res.map(lambda d: AuthSession(
            dni=str(d["dni"]),
            nombres=str(d.get("nombres") or ""),
            rol=str(d["rol"]),
            nombre_region=str(d.get("nombreRegion") or ""),
            token=str(d["token"]),
        ))
        if session.ok and session.value.rol not in ALLOWED_ROLES:
            return Result.failure(ApiError(ErrorKind.FORBIDDEN, "Sin permisos de acceso"))
        return session


class ConferencesResource(_Resource):
    def list(self) -> Result[list[Conference]]:
        return self._client.get("/Conferencias", message="Error al cargar conferencias").map(
            _list_of(Conference.from_api)
        )

    def create(self, request: ConferenceRequest) -> Result[None]:
        return self._client.post("/Conferencias", json=request.to_payload(), message="Error al crear la conferencia")

    def update(self, conference_id: str, request: ConferenceRequest) -> Result[None]:
        return self._client.put(
            f"/Conferencias/{conference_id}", json=request.to_payload(),
            message="Error al actualizar la conferencia",
        )

    def delete(self, conference_id: str) -> Result[None]:
        return self._client.delete(f"/Conferencias/{conference_id}", message="Error al eliminar la conferencia")


class UsersResource(_Resource):
    def list(self) -> Result[list[User]]:
        return self._client.get("/Usuarios", message="Error al cargar usuarios").map(_list_of(User.from_api))

    def search(self, nombre: str, id_region: str | None = None) -> Result[list[User]]:
        return self._client.get(
            "/Usuarios/buscar",
            params={"nombre": nombre, "idRegion": id_region},
            message="Error al buscar usuarios",
        ).map(_list_of(User.from_api))

    def create(self, request: UserRequest) -> Result[None]:
        return self._client.post("/Usuarios", json=request.to_payload(), message="Error al crear el usuario")

    def update(self, dni: str, request: UserRequest) -> Result[None]:
        return self._client.put(
            f"/Usuarios/{dni}", json=request.to_update_payload(), message="Error al actualizar el usuario"
        )

    def delete(self, dni: str) -> Result[None]:
        return self._client.delete(f"/Usuarios/{dni}", message="Error al eliminar el usuario")


class RegionsResource(_Resource):
    def list(self) -> Result[list[Region]]:
        return self._client.get("/Regiones", message="Error al cargar regiones").map(_list_of(Region.from_api))

    def create(self, nombres: str) -> Result[None]:
        return self._client.post("/Regiones", json={"nombres": nombres}, message="Error al crear la región")

    def update(self, region_id: str, nombres: str) -> Result[None]:
        return self._client.put(
            f"/Regiones/{region_id}", json={"nombres": nombres}, message="Error al actualizar la región"
        )

    def delete(self, region_id: str) -> Result[None]:
        return self._client.delete(f"/Regiones/{region_id}", message="Error al eliminar la región")


class ParticipationsResource(_Resource):
    def list(self) -> Result[list[Participation]]:
        return self._client.get("/Participaciones", message="Error al cargar participaciones").map(
            _list_of(Participation.from_api)
        )

    def create(self, request: ParticipationRequest) -> Result[None]:
        return self._client.post(
            "/Participaciones", json=request.to_payload(), message="Error al registrar la participación"
        )

    def delete(self, participation_id: str) -> Result[None]:
        return self._client.delete(
            f"/Participaciones/{participation_id}", message="Error al eliminar la participación"
        )

    def export_csv(self) -> Result[str]:
        """Texto crudo del endpoint de exportación (CSV o JSON según el servidor)."""
        return self._client.get("/Participaciones/exportar", text=True, message="Error al exportar participaciones")


class PaymentsResource(_Resource):
    def list(self) -> Result[list[Payment]]:
        return self._client.get("/Pagos", message="Error al cargar pagos").map(_list_of(Payment.from_api))

    def create(self, request: PaymentRequest) -> Result[None]:
        return self._client.post("/Pagos", json=request.to_payload(), message="Error al registrar el pago")

    def delete(self, payment_id: str) -> Result[None]:
        return self._client.delete(f"/Pagos/{payment_id}", message="Error al eliminar el pago")

    def missing_next_conference(self) -> Result[list[MissingPayment]]:
        return self._client.get(
            "/Pagos/faltantes-proxima-conferencia", message="Error al cargar pagos faltantes"
        ).map(_list_of(MissingPayment.from_api))


class ReportsResource(_Resource):
    def users_total(self) -> Result[UsersTotalReport]:
        return self._client.get("/Reportes/usuarios-total", message="Error al cargar el total de usuarios").map(
            UsersTotalReport.from_api
        )

    def participants(self) -> Result[ParticipantsReport]:
        return self._client.get("/Reportes/participantes", message="Error al cargar participantes").map(
            ParticipantsReport.from_api
        )

    def conference(self, conference_id: str, region_id: str | None = None) -> Result[ConferenceFinancialReport]:
        return self._client.get(
            f"/Reportes/conferencia/{conference_id}",
            params={"regionId": region_id},
            message="Error al cargar el reporte de la conferencia",
        ).map(ConferenceFinancialReport.from_api)


class InvestorsResource(_Resource):
    def list(self) -> Result[list[Inversor]]:
        return self._client.get("/Inversores", message="Error al cargar inversores").map(_list_of(Inversor.from_api))

    def create(self, request: InversorRequest) -> Result[None]:
        return self._client.post("/Inversores", json=request.to_payload(), message="Error al crear el inversor")

    def update(self, inversor_id: str, request: InversorRequest) -> Result[None]:
        return self._client.put(
            f"/Inversores/{inversor_id}", json=request.to_payload(), message="Error al actualizar el inversor"
        )

    def delete(self, inversor_id: str) -> Result[None]:
        return self._client.delete(f"/Inversores/{inversor_id}", message="Error al eliminar el inversor")

    # Pagos de inversores

    def list_payments(self) -> Result[list[PagoInversor]]:
        return self._client.get("/PagosInversores", message="Error al cargar pagos de inversores").map(
            _list_of(PagoInversor.from_api)
        )

    def create_payment(self, request: PagoInversorRequest) -> Result[None]:
        return self._client.post(
            "/PagosInversores", json=request.to_payload(), message="Error al registrar el pago del inversor"
        )

    def delete_payment(self, pago_id: str) -> Result[None]:
        return self._client.delete(f"/PagosInversores/{pago_id}", message="Error al eliminar el pago del inversor")

    # Tipos

    def list_types(self) -> Result[list[Tipo]]:
        return self._client.get("/Tipos", message="Error al cargar tipos").map(_list_of(Tipo.from_api))

    def create_type(self, nombre: str, es_micro: bool, descripcion: str = "") -> Result[None]:
        return self._client.post(
            "/Tipos",
            json={"nombre": nombre, "esMicroinversionista": es_micro, "descripcion": descripcion},
            message="Error al crear el tipo",
        )

    def delete_type(self, tipo_id: str) -> Result[None]:
        return self._client.delete(f"/Tipos/{tipo_id}", message="Error al eliminar el tipo")

    # Reportes

    def report_for(self, inversor_id: str, mes: int | None = None, anio: int | None = None) -> Result[ReporteInversor]:
        return self._client.get(
            f"/ReportesInversores/inversor/{inversor_id}",
            params={"mes": mes, "anio": anio},
            message="Error al cargar el reporte del inversor",
        ).map(ReporteInversor.from_api)

    def general_report(self, mes: int, anio: int, tipo: str = "Ambos") -> Result[ReporteGeneral]:
        return self._client.get(
            "/ReportesInversores/general",
            params={"mes": mes, "anio": anio, "tipo": tipo},
            message="Error al cargar el reporte general",
        ).map(ReporteGeneral.from_api)

    def expenses_income_report(self, mes: int | None = None, anio: int | None = None) -> Result[ReporteGastosIngresos]:
        # Sin mes o año se pide el acumulado global
        if mes is None or anio is None:
            res = self._client.get(
                "/ReportesInversores/gastos-ingresos/global",
                message="Error al cargar el reporte de gastos e ingresos",
            )
        else:
            res = self._client.get(
                "/ReportesInversores/gastos-ingresos",
                params={"mes": mes, "anio": anio},
                message="Error al cargar el reporte de gastos e ingresos",
            )
        return res.map(ReporteGastosIngresos.from_api)


class ExpensesResource(_Resource):
    def list(self, mes: int | None = None, anio: int | None = None, categoria: str | None = None) -> Result[list[Gasto]]:
        return self._client.get(
            "/Gastos",
            params={"mes": mes, "anio": anio, "categoria": categoria},
            message="Error al cargar gastos",
        ).map(_list_of(Gasto.from_api))

    def totals(self, categoria: str | None = None) -> Result[GastoTotals]:
        return self._client.get(
            "/Gastos/totales", params={"categoria": categoria}, message="Error al cargar totales de gastos"
        ).map(GastoTotals.from_api)

    def create(self, request: GastoRequest) -> Result[None]:
        return self._client.post("/Gastos", json=request.to_payload(), message="Error al registrar el gasto")

    def delete(self, gasto_id: str) -> Result[None]:
        return self._client.delete(f"/Gastos/{gasto_id}", message="Error al eliminar el gasto")


class RndcApi:
    """Fachada con todos los grupos de recursos sobre un mismo cliente."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.auth = AuthResource(client)
        self.conferences = ConferencesResource(client)
        self.users = UsersResource(client)
        self.regions = RegionsResource(client)
        self.participations = ParticipationsResource(client)
        self.payments = PaymentsResource(client)
        self.reports = ReportsResource(client)
        self.investors = InvestorsResource(client)
        self.expenses = ExpensesResource(client)
