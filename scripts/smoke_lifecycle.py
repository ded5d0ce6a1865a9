#!/usr/bin/env python3
"""
Prueba de humo del ciclo completo de un pedido contra una API en ejecución
Ejecutar desde la raíz del proyecto (tras scripts/create_test_users.py):

    python scripts/smoke_lifecycle.py [BASE_URL]
"""

import sys
import asyncio

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:10000/api/v1"
USERS = {
    "cliente": {"email": "cliente@routebid.com", "password": "cliente123"},
    "conductor1": {"email": "conductor1@routebid.com", "password": "conductor123"},
    "conductor2": {"email": "conductor2@routebid.com", "password": "conductor123"}
}

class LifecycleTester:
    def __init__(self):
        self.client = httpx.AsyncClient(base_url=BASE_URL)
        self.tokens = {}
        self.user_ids = {}

    async def login_all_users(self) -> bool:
        """Login de todos los usuarios necesarios"""
        print("🔐 Realizando login de usuarios...")

        for name, credentials in USERS.items():
            response = await self.client.post("/auth/login-json", json=credentials)
            if response.status_code != 200:
                print(f"❌ Error login {name}: {response.status_code} {response.text}")
                return False
            data = response.json()
            self.tokens[name] = data["access_token"]
            self.user_ids[name] = data["user"]["id"]
            print(f"✅ Login exitoso: {name}")

        return True

    def get_headers(self, name: str):
        return {"Authorization": f"Bearer {self.tokens[name]}"}

    async def step(self, label: str, method: str, url: str, user: str, **kwargs):
        response = await self.client.request(method, url, headers=self.get_headers(user), **kwargs)
        mark = "✅" if response.status_code < 400 else "❌"
        print(f"{mark} {label}: {response.status_code}")
        if response.status_code >= 400:
            print(f"   Response: {response.text}")
        return response

    async def run(self) -> bool:
        if not await self.login_all_users():
            return False

        order = await self.step("Publicar pedido", "POST", "/orders", "cliente", json={
            "title": "Sobre urgente",
            "pickup": {"address": "Times Square", "lat": 40.7600, "lng": -73.9840},
            "delivery": {"address": "Wall St", "lat": 40.7069, "lng": -74.0113},
            "price": 20.00
        })
        if order.status_code != 200:
            return False
        order_id = order.json()["order"]["id"]
        print(f"   Pedido {order.json()['order']['order_number']}")

        nearby = await self.step("Pedidos cercanos (conductor1)", "GET", "/orders", "conductor1")
        for item in nearby.json().get("orders", []):
            if item["id"] == order_id:
                print(f"   Distancia: {item.get('distance_km')} km")

        await self.step("Oferta conductor1", "POST", f"/orders/{order_id}/bid", "conductor1", json={"bid_price": 18.50})
        await self.step("Oferta conductor2", "POST", f"/orders/{order_id}/bid", "conductor2", json={"bid_price": 22.00})

        accepted = await self.step(
            "Aceptar oferta conductor1", "POST", f"/orders/{order_id}/accept-bid", "cliente",
            json={"user_id": self.user_ids["conductor1"]}
        )
        if accepted.status_code != 200:
            return False

        await self.step("Recolección", "POST", f"/orders/{order_id}/pickup", "conductor1")
        await self.step("En tránsito", "POST", f"/orders/{order_id}/in-transit", "conductor1")
        await self.step(
            "Ubicación", "POST", f"/orders/{order_id}/location", "conductor1",
            json={"lat": 40.7300, "lng": -73.9950}
        )
        await self.step("Entrega", "POST", f"/orders/{order_id}/deliver", "conductor1")

        tracking = await self.step("Seguimiento", "GET", f"/orders/{order_id}/tracking", "cliente")
        print(f"   Estado final: {tracking.json().get('status')}")

        inbox = await self.step("Notificaciones conductor2", "GET", "/notifications", "conductor2")
        print(f"   Tipos: {[n['type'] for n in inbox.json().get('notifications', [])]}")

        return tracking.json().get("status") == "delivered"

async def main():
    tester = LifecycleTester()
    try:
        ok = await tester.run()
    finally:
        await tester.client.aclose()
    print("\n🎉 Ciclo completo OK" if ok else "\n❌ Ciclo incompleto")
    return 0 if ok else 1

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
