from conftest import sign_in


def test_signup_then_login_returns_bearer_token(client):
    response = client.post("/auth/signup", json={"email": "Farmacia@Hospital.es", "password": "secreto123"})
    assert response.status_code == 201
    assert response.json() == {"mensaje": "Registro OK."}

    response = client.post("/auth/login", json={"email": "farmacia@hospital.es", "password": "secreto123"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]


def test_signup_twice_is_rejected(client):
    client.post("/auth/signup", json={"email": "a@hospital.es", "password": "secreto123"})
    response = client.post("/auth/signup", json={"email": "A@hospital.es", "password": "otro12345"})
    assert response.status_code == 400
    assert response.json()["detail"] == "El usuario ya está registrado."


def test_short_password_is_rejected(client):
    response = client.post("/auth/signup", json={"email": "a@hospital.es", "password": "123"})
    assert response.status_code == 422


def test_wrong_password_is_rejected(client):
    client.post("/auth/signup", json={"email": "a@hospital.es", "password": "secreto123"})
    response = client.post("/auth/login", json={"email": "a@hospital.es", "password": "incorrecta"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Credenciales de acceso no válidas."


def test_session_reports_current_user(client):
    headers = sign_in(client, email="b@hospital.es")
    response = client.get("/auth/session", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "b@hospital.es"
    assert response.json()["user_id"] > 0


def test_session_without_token_is_unauthorized(client):
    response = client.get("/auth/session")
    assert response.status_code == 401
    assert response.json()["detail"] == "Sesión no iniciada."


def test_malformed_header_and_token(client):
    assert client.get("/auth/session", headers={"Authorization": "Token abc"}).status_code == 401
    response = client.get("/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"].startswith("Token no válido")


def test_logout_revokes_the_session(client):
    headers = sign_in(client)
    assert client.post("/auth/logout", headers=headers).json() == {"mensaje": "Sesión cerrada."}

    response = client.get("/auth/session", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "La sesión ya no está activa."


def test_logout_only_closes_its_own_session(client):
    primera = sign_in(client)
    segunda = sign_in(client)
    client.post("/auth/logout", headers=primera)
    assert client.get("/auth/session", headers=segunda).status_code == 200
