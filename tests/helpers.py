"""Request helpers shared by the HTTP tests."""

from httpx import AsyncClient


async def register_and_login(client: AsyncClient, username: str = "alice", password: str = "pw1"):
    """Register then log in through the real forms; returns the login response."""
    await client.post("/register", data={"username": username, "password": password})
    return await client.post("/login", data={"username": username, "password": password})
