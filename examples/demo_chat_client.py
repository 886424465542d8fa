from rich.console import Console
from rich.prompt import Prompt
from rich.json import JSON
import asyncio
import websockets
import json

console = Console()


async def receive_messages(websocket):
    """打印服务器转发的所有消息"""
    try:
        async for raw in websocket:
            console.print("[bold green]Received:[/bold green]")
            console.print(JSON(raw))
    except websockets.exceptions.ConnectionClosed:
        console.print("[bold red]Connection closed[/bold red]")


async def connect_to_chat():
    uri = Prompt.ask(
        "[bold green]Enter WebSocket URL", default="ws://localhost:8000/ws/chat"
    )
    token = Prompt.ask("[bold green]Enter access token")
    uri = f"{uri}?token={token}"
    console.print(f"[bold blue]Connecting to WebSocket:[/bold blue] {uri}")

    async with websockets.connect(uri) as websocket:
        receiver = asyncio.create_task(receive_messages(websocket))
        try:
            while True:
                user_input = await asyncio.to_thread(
                    Prompt.ask, "[bold yellow]Enter message to send (or 'exit' to quit)"
                )
                if user_input.lower() == "exit":
                    console.print("[bold red]Exiting chat client...[/bold red]")
                    break

                await websocket.send(json.dumps({"text": user_input}))
                console.print(f"[bold blue]Sent:[/bold blue] {user_input}")
        finally:
            receiver.cancel()


if __name__ == "__main__":
    asyncio.run(connect_to_chat())
