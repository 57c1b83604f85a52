"""
Tests de la API HTTP de reservas
Formato de respuestas y códigos de estado
"""

from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from main import app
from models.departamento import Departamento
from models.limpieza import TareaLimpieza
from services.reserva_service import ReservaService
from utils.timezone import ahora


def _payload(departamento, cliente, inicio="2025-06-10", fin="2025-06-15", **extra):
    data = {
        "departamentoId": departamento.id,
        "clienteId": cliente.id,
        "fechaInicio": inicio,
        "fechaFin": fin,
        "monto": 450.5,
    }
    data.update(extra)
    return data


def _estado_departamento(db, departamento_id):
    db.expire_all()
    return db.query(Departamento).filter(Departamento.id == departamento_id).first().estado


class TestCrearReservaEndpoint:

    def test_crear_reserva(self, client, db, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente, metodoPago="tarjeta"))

        assert response.status_code == 201
        data = response.json()
        assert data["mensaje"] == "Reserva creada exitosamente"
        reserva = data["reserva"]
        assert reserva["departamentoId"] == departamento.id
        assert reserva["clienteId"] == cliente.id
        assert reserva["estado"] == "pendiente"
        assert reserva["metodoPago"] == "tarjeta"
        assert reserva["pagado"] is False
        assert float(reserva["monto"]) == 450.5
        assert reserva["fechaInicio"].startswith("2025-06-10")
        assert _estado_departamento(db, departamento.id) == "reservado"

    def test_conflicto_devuelve_400_con_conflictos(self, client, departamento, cliente, crear_reserva_db):
        existente = crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))

        response = client.post("/reservas", json=_payload(departamento, cliente, "2025-06-12", "2025-06-20"))

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "El departamento no está disponible en esas fechas"
        assert data["puedeForzar"] is True
        assert [c["id"] for c in data["conflictos"]] == [existente.id]
        assert data["conflictos"][0]["estado"] == "confirmada"
        assert "timestamp" in data

    def test_forzar_ignora_conflictos(self, client, departamento, cliente, crear_reserva_db):
        crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))

        response = client.post(
            "/reservas", json=_payload(departamento, cliente, "2025-06-12", "2025-06-20", forzar=True)
        )
        assert response.status_code == 201

    def test_turnover_el_dia_de_salida(self, client, departamento, cliente, crear_reserva_db):
        crear_reserva_db(datetime(2025, 6, 10, 14), datetime(2025, 6, 15, 10))

        response = client.post("/reservas", json=_payload(departamento, cliente, "2025-06-15", "2025-06-18"))
        assert response.status_code == 201

    def test_fecha_con_zona_horaria(self, client, departamento, cliente, crear_reserva_db):
        crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))

        # 02:00 UTC del 15 todavía es el 14 en la hora del hotel
        response = client.post(
            "/reservas", json=_payload(departamento, cliente, "2025-06-15T02:00:00Z", "2025-06-18T12:00:00Z")
        )
        assert response.status_code == 400
        assert response.json()["puedeForzar"] is True

    def test_campos_faltantes(self, client, departamento):
        response = client.post("/reservas", json={"departamentoId": departamento.id})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Datos inválidos"
        assert data["detalles"]

    def test_monto_no_positivo(self, client, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente, monto=0))
        assert response.status_code == 400

    def test_fecha_invalida(self, client, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente, inicio="no-es-fecha"))
        assert response.status_code == 400

    def test_rango_invertido(self, client, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente, "2025-06-15", "2025-06-10"))
        assert response.status_code == 400
        assert "error" in response.json()

    def test_rango_vacio(self, client, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente, "2025-06-15", "2025-06-15"))
        assert response.status_code == 400

    def test_departamento_inexistente(self, client, departamento, cliente):
        data = _payload(departamento, cliente, forzar=True)
        data["departamentoId"] = 9999
        response = client.post("/reservas", json=data)
        assert response.status_code == 404
        assert response.json()["error"] == "Departamento no encontrado"

    def test_cliente_inexistente(self, client, departamento, cliente):
        data = _payload(departamento, cliente)
        data["clienteId"] = 9999
        response = client.post("/reservas", json=data)
        assert response.status_code == 404


class TestConsultasEndpoint:

    def test_disponibilidad(self, client, departamento, crear_reserva_db):
        existente = crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))

        libre = client.get(
            "/reservas/disponibilidad",
            params={"departamentoId": departamento.id, "fechaInicio": "2025-06-15", "fechaFin": "2025-06-18"},
        )
        assert libre.status_code == 200
        assert libre.json()["disponible"] is True
        assert libre.json()["conflictos"] == []

        ocupado = client.get(
            "/reservas/disponibilidad",
            params={"departamentoId": departamento.id, "fechaInicio": "2025-06-14", "fechaFin": "2025-06-16"},
        )
        assert ocupado.status_code == 200
        assert ocupado.json()["disponible"] is False
        assert [c["id"] for c in ocupado.json()["conflictos"]] == [existente.id]

    def test_disponibilidad_rango_invalido(self, client, departamento):
        response = client.get(
            "/reservas/disponibilidad",
            params={"departamentoId": departamento.id, "fechaInicio": "2025-06-15", "fechaFin": "2025-06-15"},
        )
        assert response.status_code == 400

    def test_disponibilidad_fecha_mal_formada(self, client, departamento):
        response = client.get(
            "/reservas/disponibilidad",
            params={"departamentoId": departamento.id, "fechaInicio": "15/06/2025", "fechaFin": "2025-06-18"},
        )
        assert response.status_code == 400

    def test_listar_y_filtrar(self, client, crear_reserva_db):
        crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))
        cancelada = crear_reserva_db(datetime(2025, 7, 1), datetime(2025, 7, 5), estado="cancelada")

        todas = client.get("/reservas")
        assert todas.status_code == 200
        assert todas.json()["total"] == 2
        # Más recientes primero
        assert todas.json()["reservas"][0]["id"] == cancelada.id

        filtradas = client.get("/reservas", params={"estado": "cancelada"})
        assert [r["id"] for r in filtradas.json()["reservas"]] == [cancelada.id]

        por_fecha = client.get("/reservas", params={"fecha": "2025-07-01"})
        assert [r["id"] for r in por_fecha.json()["reservas"]] == [cancelada.id]

    def test_listar_estado_invalido(self, client, db):
        response = client.get("/reservas", params={"estado": "perdida"})
        assert response.status_code == 400

    def test_proximas(self, client, crear_reserva_db):
        hoy = ahora()
        cercana = crear_reserva_db(hoy + timedelta(days=2), hoy + timedelta(days=4), estado="pendiente")
        crear_reserva_db(hoy + timedelta(days=30), hoy + timedelta(days=33))
        crear_reserva_db(hoy + timedelta(days=3), hoy + timedelta(days=5), estado="cancelada")

        response = client.get("/reservas/proximas")

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["reservas"]] == [cercana.id]

    def test_obtener_reserva(self, client, crear_reserva_db):
        reserva = crear_reserva_db(datetime(2025, 6, 10), datetime(2025, 6, 15))
        response = client.get(f"/reservas/{reserva.id}")
        assert response.status_code == 200
        assert response.json()["id"] == reserva.id

    def test_obtener_reserva_inexistente(self, client, db):
        response = client.get("/reservas/9999")
        assert response.status_code == 404
        assert response.json()["error"] == "Reserva no encontrada"

    def test_historial(self, client, departamento, cliente):
        reserva_id = client.post("/reservas", json=_payload(departamento, cliente)).json()["reserva"]["id"]
        client.post(f"/reservas/{reserva_id}/cancelar", json={"motivo": "Cambio de planes"})

        response = client.get(f"/reservas/{reserva_id}/historial")

        assert response.status_code == 200
        historial = response.json()
        assert [h["estadoNuevo"] for h in historial] == ["pendiente", "cancelada"]
        assert historial[1]["estadoAnterior"] == "pendiente"
        assert historial[1]["motivo"] == "Cambio de planes"


class TestCicloDeVidaEndpoint:

    def _crear(self, client, departamento, cliente):
        response = client.post("/reservas", json=_payload(departamento, cliente))
        assert response.status_code == 201
        return response.json()["reserva"]["id"]

    def test_check_in(self, client, db, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.post(f"/reservas/{reserva_id}/check-in", json={"notasCheckIn": "Llegó temprano"})

        assert response.status_code == 200
        reserva = response.json()["reserva"]
        assert reserva["estado"] == "confirmada"
        assert reserva["checkIn"] is not None
        assert reserva["notasCheckIn"] == "Llegó temprano"
        assert _estado_departamento(db, departamento.id) == "ocupado"

    def test_check_in_sin_cuerpo(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)
        response = client.post(f"/reservas/{reserva_id}/check-in")
        assert response.status_code == 200
        assert response.json()["reserva"]["notasCheckIn"] is None

    def test_check_out(self, client, db, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)
        client.post(f"/reservas/{reserva_id}/check-in")

        response = client.post(f"/reservas/{reserva_id}/check-out", json={"notasCheckOut": "Sin novedades"})

        assert response.status_code == 200
        data = response.json()
        assert data["reserva"]["estado"] == "completada"
        assert data["reserva"]["notasCheckOut"] == "Sin novedades"
        assert data["tareaLimpieza"]["departamentoId"] == departamento.id
        assert data["tareaLimpieza"]["reservaId"] == reserva_id
        assert data["tareaLimpieza"]["tipo"] == "checkout"
        assert _estado_departamento(db, departamento.id) == "disponible"
        assert db.query(TareaLimpieza).count() == 1

    def test_pago(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.post(f"/reservas/{reserva_id}/pago", json={"metodoPago": "efectivo"})

        assert response.status_code == 200
        reserva = response.json()["reserva"]
        assert reserva["pagado"] is True
        assert reserva["metodoPago"] == "efectivo"
        assert reserva["fechaPago"] is not None

    def test_pago_sin_metodo(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.post(f"/reservas/{reserva_id}/pago", json={})

        assert response.status_code == 400
        assert response.json()["requeridos"] == ["metodoPago"]

    def test_cancelar(self, client, db, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.post(f"/reservas/{reserva_id}/cancelar")

        assert response.status_code == 200
        assert response.json()["reserva"]["estado"] == "cancelada"
        assert response.json()["reserva"]["notasCheckOut"] == "Cancelada"
        assert _estado_departamento(db, departamento.id) == "disponible"

    def test_cancelar_dos_veces(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)
        client.post(f"/reservas/{reserva_id}/cancelar")

        response = client.post(f"/reservas/{reserva_id}/cancelar")
        assert response.status_code == 400

    def test_operaciones_sobre_reserva_inexistente(self, client, db):
        assert client.post("/reservas/9999/check-in").status_code == 404
        assert client.post("/reservas/9999/check-out").status_code == 404
        assert client.post("/reservas/9999/pago", json={"metodoPago": "efectivo"}).status_code == 404
        assert client.post("/reservas/9999/cancelar").status_code == 404
        assert client.put("/reservas/9999", json={"monto": 10}).status_code == 404

    def test_actualizar(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.put(f"/reservas/{reserva_id}", json={"monto": 500, "fechaFin": "2025-06-17"})

        assert response.status_code == 200
        reserva = response.json()["reserva"]
        assert float(reserva["monto"]) == 500
        assert reserva["fechaFin"].startswith("2025-06-17")

    def test_actualizar_sin_campos(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)
        response = client.put(f"/reservas/{reserva_id}", json={})
        assert response.status_code == 400

    def test_actualizar_con_null_en_campo_obligatorio(self, client, departamento, cliente):
        reserva_id = self._crear(client, departamento, cliente)

        response = client.put(f"/reservas/{reserva_id}", json={"monto": None})

        assert response.status_code == 400
        assert response.json()["error"] == "Datos inválidos"
        assert float(client.get(f"/reservas/{reserva_id}").json()["monto"]) == 450.5

    def test_actualizar_con_conflicto(self, client, departamento, cliente, crear_reserva_db):
        crear_reserva_db(datetime(2025, 6, 20), datetime(2025, 6, 25))
        reserva_id = self._crear(client, departamento, cliente)

        response = client.put(f"/reservas/{reserva_id}", json={"fechaFin": "2025-06-22"})
        assert response.status_code == 400
        assert response.json()["puedeForzar"] is True

        forzada = client.put(f"/reservas/{reserva_id}", json={"fechaFin": "2025-06-22", "forzar": True})
        assert forzada.status_code == 200


class TestErroresInesperados:

    def test_error_interno_no_expone_detalle(self, db, monkeypatch):
        def _falla(db_, reserva_id):
            raise RuntimeError("password=secreto")

        monkeypatch.setattr(ReservaService, "obtener_reserva", staticmethod(_falla))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/reservas/1")

        assert response.status_code == 500
        assert response.json()["error"] == "Error interno del servidor"
        assert "secreto" not in response.text
