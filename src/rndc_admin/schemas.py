"""Tipos de dominio: espejo de los DTOs que devuelve la API.

Cada DTO expone ``from_api`` (dict JSON -> dataclass) y, cuando la API lo
recibe, un ``*Request`` con ``to_payload`` para el cuerpo de la petición.
El cliente no valida reglas de negocio: solo normaliza formas y tipos.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

ROLES = ("Admin", "Encargado", "Oyente")
ROLES_WITH_PASSWORD = ("Admin", "Encargado")

# Códigos de moneda que usa la API
CURRENCY_DOLARES = 0
CURRENCY_SOLES = 1
CURRENCY_EUROS = 2

_CURRENCY_BY_NAME = {
    "dolares": CURRENCY_DOLARES,
    "dólares": CURRENCY_DOLARES,
    "usd": CURRENCY_DOLARES,
    "soles": CURRENCY_SOLES,
    "pen": CURRENCY_SOLES,
    "euros": CURRENCY_EUROS,
    "eur": CURRENCY_EUROS,
}
_CURRENCY_NAMES = {CURRENCY_DOLARES: "Dólares", CURRENCY_SOLES: "Soles", CURRENCY_EUROS: "Euros"}
_CURRENCY_SYMBOLS = {CURRENCY_DOLARES: "$", CURRENCY_SOLES: "S/", CURRENCY_EUROS: "€"}

GASTO_CATEGORIAS = (
    "Marketing",
    "Infraestructura",
    "Personal",
    "Servicios",
    "Equipamiento",
    "Consultoria",
    "Legal",
    "Otros",
)


def normalize_currency(value: Any) -> int | None:
    """Convierte una moneda (código o nombre) a su código numérico.

    Devuelve None si no se reconoce.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value in _CURRENCY_NAMES else None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return normalize_currency(int(text))
        return _CURRENCY_BY_NAME.get(text.lower())
    return None


def currency_name(value: Any) -> str:
    code = normalize_currency(value)
    return _CURRENCY_NAMES.get(code, "Desconocido") if code is not None else "Desconocido"


def currency_symbol(value: Any) -> str:
    code = normalize_currency(value)
    return _CURRENCY_SYMBOLS.get(code, "") if code is not None else ""


def format_money(amount: float, currency: Any = CURRENCY_SOLES) -> str:
    symbol = currency_symbol(currency)
    return f"{symbol} {amount:,.2f}".strip()


def categoria_name(value: Any) -> str:
    """Nombre de categoría de gasto: la API puede enviar índice o texto."""
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(GASTO_CATEGORIAS):
            return GASTO_CATEGORIAS[value]
        return f"Categoría {value}"
    return str(value or "")


def _float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def _opt_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any, default: int = 0) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _list(data: Mapping[str, Any], key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _dict(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


# --- Entidades ---

@dataclass(frozen=True, slots=True)
class Region:
    id: str
    nombres: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Region":
        return cls(id=_str(data.get("id")), nombres=_str(data.get("nombres")))


@dataclass(frozen=True, slots=True)
class User:
    dni: str
    nombres: str
    sexo: bool
    fecha_nacimiento: str
    telefono: str
    rol: str
    id_region: str
    nombre_region: str
    edad: int | None = None
    grupo_edad: str = ""

    @property
    def sexo_label(self) -> str:
        return "Masculino" if self.sexo else "Femenino"

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "User":
        region = _dict(data, "region")
        return cls(
            dni=_str(data.get("dni")),
            nombres=_str(data.get("nombres")),
            sexo=bool(data.get("sexo")),
            fecha_nacimiento=_str(data.get("fechaNacimiento")),
            telefono=_str(data.get("telefono")),
            rol=_str(data.get("rol")) or "Oyente",
            id_region=_str(data.get("idRegion") or region.get("id")),
            nombre_region=_str(region.get("nombres") or data.get("nombreRegion")),
            edad=_int(data["edad"]) if data.get("edad") is not None else None,
            grupo_edad=_str(data.get("grupoEdad")),
        )


@dataclass(frozen=True, slots=True)
class UserRequest:
    dni: str
    nombres: str
    sexo: bool
    fecha_nacimiento: str
    telefono: str
    rol: str
    id_region: str
    password: str | None = None

    def to_payload(self) -> dict[str, Any]:
        # Solo Admin/Encargado tienen contraseña
        password = self.password if self.rol in ROLES_WITH_PASSWORD else None
        return {
            "dni": self.dni,
            "nombres": self.nombres,
            "sexo": self.sexo,
            "fechaNacimiento": self.fecha_nacimiento,
            "telefono": self.telefono,
            "rol": self.rol,
            "password": password or None,
            "idRegion": self.id_region,
        }

    def to_update_payload(self) -> dict[str, Any]:
        """Cuerpo del PUT: el dni actual va en la ruta y el nuevo en ``nuevoDni``."""
        payload = self.to_payload()
        payload["nuevoDni"] = payload.pop("dni")
        return payload


@dataclass(frozen=True, slots=True)
class Conference:
    id: str
    nombres: str
    id_region: str
    nombre_region: str
    fecha_inicio: str
    fecha_fin: str
    fecha_fin_ins: str
    capacidad: int
    monto_ins: float | None = None
    participantes_inscritos: int = 0
    esta_vigente: bool = True

    @property
    def status(self) -> str:
        if not self.esta_vigente:
            return "No Vigente"
        if self.participantes_inscritos >= self.capacidad:
            return "Completa"
        return "Disponible"

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Conference":
        return cls(
            id=_str(data.get("id")),
            nombres=_str(data.get("nombres")),
            id_region=_str(data.get("idRegion")),
            nombre_region=_str(data.get("nombreRegion")),
            fecha_inicio=_str(data.get("fechaInicio")),
            fecha_fin=_str(data.get("fechaFin")),
            fecha_fin_ins=_str(data.get("fechaFinIns")),
            capacidad=_int(data.get("capacidad")),
            monto_ins=_opt_float(data.get("montoIns")),
            participantes_inscritos=_int(data.get("participantesInscritos")),
            esta_vigente=bool(data.get("estaVigente", True)),
        )


@dataclass(frozen=True, slots=True)
class ConferenceRequest:
    nombres: str
    id_region: str
    fecha_inicio: str
    fecha_fin: str
    fecha_fin_ins: str
    capacidad: int
    monto_ins: float | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "nombres": self.nombres,
            "idRegion": self.id_region,
            "fechaInicio": self.fecha_inicio,
            "fechaFin": self.fecha_fin,
            "fechaFinIns": self.fecha_fin_ins,
            "capacidad": self.capacidad,
        }
        if self.monto_ins is not None:
            payload["montoIns"] = self.monto_ins
        return payload


@dataclass(frozen=True, slots=True)
class Participation:
    id: str
    dni_usuario: str
    nombre_usuario: str
    id_conferencia: str
    nombre_conferencia: str
    servicio: str
    fecha: str
    almuerzo: bool | None = None
    cena: bool | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Participation":
        return cls(
            id=_str(data.get("id")),
            dni_usuario=_str(data.get("dniUsuario")),
            nombre_usuario=_str(data.get("nombreUsuario")),
            id_conferencia=_str(data.get("idConferencia")),
            nombre_conferencia=_str(data.get("nombreConferencia")),
            servicio=_str(data.get("servicio")),
            fecha=_str(data.get("fecha")),
            almuerzo=_opt_bool(data.get("almuerzo")),
            cena=_opt_bool(data.get("cena")),
        )


@dataclass(frozen=True, slots=True)
class ParticipationRequest:
    dni_usuario: str
    id_conferencia: str
    servicio: str
    almuerzo: bool = False
    cena: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "dniUsuario": self.dni_usuario,
            "idConferencia": self.id_conferencia,
            "servicio": self.servicio,
            "almuerzo": self.almuerzo,
            "cena": self.cena,
        }


@dataclass(frozen=True, slots=True)
class Payment:
    id: str
    dni_usuario: str
    nombre_usuario: str
    id_conferencia: str
    nombre_conferencia: str
    enlace: str
    fecha: str
    monto: float | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Payment":
        return cls(
            id=_str(data.get("id")),
            dni_usuario=_str(data.get("dniUsuario")),
            nombre_usuario=_str(data.get("nombreUsuario")),
            id_conferencia=_str(data.get("idConferencia")),
            nombre_conferencia=_str(data.get("nombreConferencia")),
            enlace=_str(data.get("enlace")),
            fecha=_str(data.get("fecha")),
            monto=_opt_float(data.get("monto")),
        )


@dataclass(frozen=True, slots=True)
class PaymentRequest:
    dni_usuario: str
    id_conferencia: str
    enlace: str
    monto: float | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "dniUsuario": self.dni_usuario,
            "idConferencia": self.id_conferencia,
            "enlace": self.enlace,
        }
        if self.monto is not None:
            payload["monto"] = self.monto
        return payload


@dataclass(frozen=True, slots=True)
class MissingPayment:
    """Participante de la próxima conferencia que aún no registra pago."""
    dni_usuario: str
    nombre_usuario: str
    id_conferencia: str
    nombre_conferencia: str
    servicio: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "MissingPayment":
        return cls(
            dni_usuario=_str(data.get("dniUsuario")),
            nombre_usuario=_str(data.get("nombreUsuario")),
            id_conferencia=_str(data.get("idConferencia")),
            nombre_conferencia=_str(data.get("nombreConferencia")),
            servicio=_str(data.get("servicio")),
        )


# --- Inversores y gastos ---

@dataclass(frozen=True, slots=True)
class Inversor:
    id: str
    nombre: str
    id_region: str
    nombre_region: str
    monto_mensual_cuota: float
    currency_cuota: int | None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Inversor":
        region = _dict(data, "region")
        return cls(
            id=_str(data.get("id")),
            nombre=_str(data.get("nombre")),
            id_region=_str(data.get("idRegion") or region.get("id")),
            nombre_region=_str(data.get("nombreRegion") or region.get("nombres")),
            monto_mensual_cuota=_float(data.get("montoMensualCuota")),
            currency_cuota=normalize_currency(data.get("currencyCuota")),
        )


@dataclass(frozen=True, slots=True)
class InversorRequest:
    nombre: str
    id_region: str
    monto_mensual_cuota: float
    currency_cuota: int = CURRENCY_SOLES

    def to_payload(self) -> dict[str, Any]:
        return {
            "nombre": self.nombre,
            "idRegion": self.id_region,
            "montoMensualCuota": self.monto_mensual_cuota,
            "currencyCuota": self.currency_cuota,
        }


@dataclass(frozen=True, slots=True)
class Tipo:
    id: str
    nombre: str
    es_microinversionista: bool
    descripcion: str = ""

    @property
    def label(self) -> str:
        return tipo_label(self.es_microinversionista)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Tipo":
        es_micro = bool(data.get("esMicroinversionista"))
        return cls(
            id=_str(data.get("id")),
            nombre=_str(data.get("nombre")) or tipo_label(es_micro),
            es_microinversionista=es_micro,
            descripcion=_str(data.get("descripcion")),
        )


def tipo_label(es_micro: bool) -> str:
    return "Microinversionista" if es_micro else "Inversionista"


@dataclass(frozen=True, slots=True)
class PagoInversor:
    id: str
    id_inversor: str
    nombre_inversor: str
    monto: float
    currency: int | None
    id_tipo: str
    es_microinversionista: bool | None
    fecha_creacion: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PagoInversor":
        tipo = _dict(data, "tipo")
        if "esMicroinversionista" in tipo:
            es_micro = _opt_bool(tipo.get("esMicroinversionista"))
        else:
            es_micro = _opt_bool(data.get("esMicroinversionista"))
        return cls(
            id=_str(data.get("id")),
            id_inversor=_str(data.get("idInversor")),
            nombre_inversor=_str(data.get("nombreInversor")),
            monto=_float(data.get("monto")),
            currency=normalize_currency(data.get("currency")),
            id_tipo=_str(data.get("idTipo") or tipo.get("id")),
            es_microinversionista=es_micro,
            fecha_creacion=_str(data.get("fechaCreacion") or data.get("fecha")),
        )


@dataclass(frozen=True, slots=True)
class PagoInversorRequest:
    id_inversor: str
    monto: float
    currency: int
    id_tipo: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "idInversor": self.id_inversor,
            "monto": self.monto,
            "currency": self.currency,
            "idTipo": self.id_tipo,
        }


@dataclass(frozen=True, slots=True)
class Gasto:
    id: str
    monto: float
    currency: int | None
    categoria: str
    descripcion: str
    fecha: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Gasto":
        return cls(
            id=_str(data.get("id")),
            monto=_float(data.get("monto")),
            currency=normalize_currency(data.get("currency")),
            categoria=categoria_name(data.get("categoria")),
            descripcion=_str(data.get("descripcion")),
            fecha=_str(data.get("fecha") or data.get("fechaCreacion")),
        )


@dataclass(frozen=True, slots=True)
class GastoRequest:
    monto: float
    currency: int
    categoria: str
    descripcion: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "monto": self.monto,
            "currency": self.currency,
            "categoria": self.categoria,
            "descripcion": self.descripcion,
        }


@dataclass(frozen=True, slots=True)
class GastoTotals:
    total_soles: float = 0.0
    total_dolares: float = 0.0
    total_euros: float = 0.0

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "GastoTotals":
        return cls(
            total_soles=_float(data.get("totalSoles")),
            total_dolares=_float(data.get("totalDolares")),
            total_euros=_float(data.get("totalEuros")),
        )


# --- Reportes (pre-agregados por el backend) ---

@dataclass(frozen=True, slots=True)
class RegionUserCount:
    id_region: str
    nombre_region: str
    cantidad_usuarios: int


@dataclass(frozen=True, slots=True)
class UsersTotalReport:
    total_general: int
    por_region: tuple[RegionUserCount, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "UsersTotalReport":
        return cls(
            total_general=_int(data.get("totalGeneral")),
            por_region=tuple(
                RegionUserCount(
                    id_region=_str(r.get("idRegion")),
                    nombre_region=_str(r.get("nombreRegion")),
                    cantidad_usuarios=_int(r.get("cantidadUsuarios")),
                )
                for r in _list(data, "porRegion")
            ),
        )


@dataclass(frozen=True, slots=True)
class ParticipantsReport:
    total_participantes_unicos: int
    total_participaciones: int

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ParticipantsReport":
        return cls(
            total_participantes_unicos=_int(data.get("totalParticipantesUnicos")),
            total_participaciones=_int(data.get("totalParticipaciones")),
        )


@dataclass(frozen=True, slots=True)
class ReportConference:
    nombres: str
    region_conferencia: str
    fecha_inicio: str
    fecha_fin: str
    fecha_fin_ins: str
    capacidad: int
    participantes_registrados: int
    capacidad_disponible: int
    total_esperado_capacidad: float
    diferencia_capacidad: float


@dataclass(frozen=True, slots=True)
class ParticipantSummary:
    total_participantes: int
    monto_esperado: float
    monto_pagado: float
    diferencia: float


@dataclass(frozen=True, slots=True)
class ReportParticipant:
    dni_usuario: str
    nombre_usuario: str
    servicio: str
    fecha_registro: str
    incluye_almuerzo: bool
    incluye_cena: bool
    monto_esperado: float
    total_pagado: float
    diferencia: float


@dataclass(frozen=True, slots=True)
class RegionBreakdown:
    region_id: str
    region_nombre: str
    total_participantes: int
    monto_esperado: float
    monto_pagado: float
    diferencia: float
    participantes: tuple[ReportParticipant, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportPayment:
    id: str
    dni_usuario: str
    monto: float
    enlace: str


@dataclass(frozen=True, slots=True)
class ConferenceFinancialReport:
    conferencia: ReportConference
    resumen: ParticipantSummary
    regiones: tuple[RegionBreakdown, ...] = ()
    pagos_sin_participacion: tuple[ReportPayment, ...] = ()
    pagos_fuera_del_filtro: tuple[ReportPayment, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ConferenceFinancialReport":
        conf = _dict(data, "conferencia")
        resumen = _dict(data, "resumenParticipantes")

        def _payment(p: Mapping[str, Any]) -> ReportPayment:
            return ReportPayment(
                id=_str(p.get("id")),
                dni_usuario=_str(p.get("dniUsuario")),
                monto=_float(p.get("monto")),
                enlace=_str(p.get("enlace")),
            )

        def _participant(p: Mapping[str, Any]) -> ReportParticipant:
            return ReportParticipant(
                dni_usuario=_str(p.get("dniUsuario")),
                nombre_usuario=_str(p.get("nombreUsuario")),
                servicio=_str(p.get("servicio")),
                fecha_registro=_str(p.get("fechaRegistro")),
                incluye_almuerzo=bool(p.get("incluyeAlmuerzo")),
                incluye_cena=bool(p.get("incluyeCena")),
                monto_esperado=_float(p.get("montoEsperado")),
                total_pagado=_float(p.get("totalPagado")),
                diferencia=_float(p.get("diferencia")),
            )

        regiones = tuple(
            RegionBreakdown(
                region_id=_str(r.get("regionId")),
                region_nombre=_str(r.get("regionNombre")),
                total_participantes=_int(r.get("totalParticipantes")),
                monto_esperado=_float(r.get("montoEsperado")),
                monto_pagado=_float(r.get("montoPagado")),
                diferencia=_float(r.get("diferencia")),
                participantes=tuple(_participant(p) for p in _list(r, "participantes")),
            )
            for r in _list(data, "regiones")
        )
        return cls(
            conferencia=ReportConference(
                nombres=_str(conf.get("nombres")),
                region_conferencia=_str(conf.get("regionConferencia")),
                fecha_inicio=_str(conf.get("fechaInicio")),
                fecha_fin=_str(conf.get("fechaFin")),
                fecha_fin_ins=_str(conf.get("fechaFinIns")),
                capacidad=_int(conf.get("capacidad")),
                participantes_registrados=_int(conf.get("participantesRegistrados")),
                capacidad_disponible=_int(conf.get("capacidadDisponible")),
                total_esperado_capacidad=_float(conf.get("totalEsperadoCapacidad")),
                diferencia_capacidad=_float(conf.get("diferenciaCapacidad")),
            ),
            resumen=ParticipantSummary(
                total_participantes=_int(resumen.get("totalParticipantes")),
                monto_esperado=_float(resumen.get("montoEsperado")),
                monto_pagado=_float(resumen.get("montoPagado")),
                diferencia=_float(resumen.get("diferencia")),
            ),
            regiones=regiones,
            pagos_sin_participacion=tuple(_payment(p) for p in _list(data, "pagosSinParticipacion")),
            pagos_fuera_del_filtro=tuple(_payment(p) for p in _list(data, "pagosFueraDelFiltro")),
        )


@dataclass(frozen=True, slots=True)
class ReportePago:
    monto: float
    currency: int | None
    fecha_creacion: str


@dataclass(frozen=True, slots=True)
class ReporteInversor:
    inversor_id: str
    nombre_inversor: str
    nombre_region: str
    estado: str
    total_soles: float
    total_dolares: float
    total_euros: float
    monto_esperado_soles: float
    monto_esperado_dolares: float
    diferencia_soles: float
    diferencia_dolares: float
    porcentaje_cumplimiento_soles: float
    porcentaje_cumplimiento_dolares: float
    numero_pagos_micro: int
    numero_pagos_inversionista: int
    pagos_micro: tuple[ReportePago, ...] = ()
    pagos_inversionista: tuple[ReportePago, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ReporteInversor":
        def _pagos(key: str) -> tuple[ReportePago, ...]:
            return tuple(
                ReportePago(
                    monto=_float(p.get("monto")),
                    currency=normalize_currency(p.get("currency")),
                    fecha_creacion=_str(p.get("fechaCreacion")),
                )
                for p in _list(data, key)
            )

        return cls(
            inversor_id=_str(data.get("inversorId")),
            nombre_inversor=_str(data.get("nombreInversor")),
            nombre_region=_str(data.get("nombreRegion")),
            estado=_str(data.get("estado")),
            total_soles=_float(data.get("totalSoles")),
            total_dolares=_float(data.get("totalDolares")),
            total_euros=_float(data.get("totalEuros")),
            monto_esperado_soles=_float(data.get("montoEsperadoSoles")),
            monto_esperado_dolares=_float(data.get("montoEsperadoDolares")),
            diferencia_soles=_float(data.get("diferenciaSoles")),
            diferencia_dolares=_float(data.get("diferenciaDolares")),
            porcentaje_cumplimiento_soles=_float(data.get("porcentajeCumplimientoSoles")),
            porcentaje_cumplimiento_dolares=_float(data.get("porcentajeCumplimientoDolares")),
            numero_pagos_micro=_int(data.get("numeroPagosMicroinversionista")),
            numero_pagos_inversionista=_int(data.get("numeroPagosInversionista")),
            pagos_micro=_pagos("pagosMicroinversionista"),
            pagos_inversionista=_pagos("pagosInversionista"),
        )


@dataclass(frozen=True, slots=True)
class ReporteGeneral:
    tipo_filtro: str
    total_soles: float
    total_dolares: float
    total_euros: float
    total_soles_mes_anterior: float
    total_dolares_mes_anterior: float
    total_euros_mes_anterior: float
    porcentaje_cambio_soles: float | None = None
    porcentaje_cambio_dolares: float | None = None
    porcentaje_cambio_euros: float | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ReporteGeneral":
        return cls(
            tipo_filtro=_str(data.get("tipoFiltro")),
            total_soles=_float(data.get("totalSoles")),
            total_dolares=_float(data.get("totalDolares")),
            total_euros=_float(data.get("totalEuros")),
            total_soles_mes_anterior=_float(data.get("totalSolesMesAnterior")),
            total_dolares_mes_anterior=_float(data.get("totalDolaresMesAnterior")),
            total_euros_mes_anterior=_float(data.get("totalEurosMesAnterior")),
            porcentaje_cambio_soles=_opt_float(data.get("porcentajeCambioSoles")),
            porcentaje_cambio_dolares=_opt_float(data.get("porcentajeCambioDolares")),
            porcentaje_cambio_euros=_opt_float(data.get("porcentajeCambioEuros")),
        )


@dataclass(frozen=True, slots=True)
class GastoCategoria:
    categoria: str
    monto_total_soles: float
    numero_transacciones: int


@dataclass(frozen=True, slots=True)
class DetalleIngreso:
    tipo_inversor: str
    monto_soles: float
    monto_dolares: float
    numero_pagos: int


@dataclass(frozen=True, slots=True)
class ReporteGastosIngresos:
    total_ingresos_soles: float
    total_ingresos_dolares: float
    total_gastos_soles: float
    total_gastos_dolares: float
    balance_soles: float
    balance_dolares: float
    balance_total_soles: float
    estado_financiero: str
    alerta_consumo_soles: str = ""
    gastos_por_categoria: tuple[GastoCategoria, ...] = field(default_factory=tuple)
    detalle_ingresos: tuple[DetalleIngreso, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ReporteGastosIngresos":
        alerta = data.get("alertaConsumoSoles")
        if isinstance(alerta, bool):
            alerta = "Consumo elevado de ingresos en soles" if alerta else ""
        return cls(
            total_ingresos_soles=_float(data.get("totalIngresosSoles")),
            total_ingresos_dolares=_float(data.get("totalIngresosDolares")),
            total_gastos_soles=_float(data.get("totalGastosSoles")),
            total_gastos_dolares=_float(data.get("totalGastosDolares")),
            balance_soles=_float(data.get("balanceSoles")),
            balance_dolares=_float(data.get("balanceDolares")),
            balance_total_soles=_float(data.get("balanceTotalSoles")),
            estado_financiero=_str(data.get("estadoFinanciero")),
            alerta_consumo_soles=_str(alerta),
            gastos_por_categoria=tuple(
                GastoCategoria(
                    categoria=categoria_name(c.get("categoria")),
                    monto_total_soles=_float(c.get("montoTotalSoles")),
                    numero_transacciones=_int(c.get("numeroTransacciones")),
                )
                for c in _list(data, "gastosPorCategoria")
            ),
            detalle_ingresos=tuple(
                DetalleIngreso(
                    tipo_inversor=_str(d.get("tipoInversor")),
                    monto_soles=_float(d.get("montoSoles")),
                    monto_dolares=_float(d.get("montoDolares")),
                    numero_pagos=_int(d.get("numeroPagos")),
                )
                for d in _list(data, "detalleIngresos")
            ),
        )
