"""
Script para crear usuarios de prueba
Ejecutar desde la raíz del proyecto: python scripts/create_test_users.py
"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from routebid.config.database import SessionLocal, engine
from routebid.shared.database.models import Base, User
from routebid.core.auth.service import AuthService

TEST_USERS = [
    {
        "email": "cliente@routebid.com",
        "password": "cliente123",
        "first_name": "Ana",
        "last_name": "Cliente",
        "role": "customer"
    },
    {
        "email": "conductor1@routebid.com",
        "password": "conductor123",
        "first_name": "Luis",
        "last_name": "Conductor",
        "role": "driver",
        # Times Square
        "last_lat": 40.7590,
        "last_lng": -73.9850
    },
    {
        "email": "conductor2@routebid.com",
        "password": "conductor123",
        "first_name": "María",
        "last_name": "Conductora",
        "role": "driver"
    }
]

def create_test_users():
    """Crear un cliente y dos conductores de prueba"""

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"✅ Ya existen {existing_users} usuarios en la base de datos")
            return

        for user_data in TEST_USERS:
            data = dict(user_data)
            password = data.pop("password")
            user = User(
                password_hash=AuthService.get_password_hash(password),
                is_active=True,
                **data
            )
            db.add(user)
            print(f"✅ Usuario creado: {user_data['email']} / {password} ({user_data['role']})")

        db.commit()
        print(f"\n🎉 {len(TEST_USERS)} usuarios de prueba creados exitosamente!")

    except Exception as e:
        db.rollback()
        print(f"❌ Error creando usuarios: {e}")
        raise

    finally:
        db.close()

if __name__ == "__main__":
    create_test_users()
