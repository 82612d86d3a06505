import asyncio
import sys
import uvicorn


async def start_server():
    config = uvicorn.Config(
        "billing_service.app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=True,
    )
    server = uvicorn.Server(config)
    await server.serve()


def run_monthly_invoices():
    # cron entry: python run_services.py invoices
    from billing_service.app.crud.scheduler.scheduler_service import run_scheduled_invoices
    run_scheduled_invoices()


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "invoices":
            run_monthly_invoices()
        else:
            asyncio.run(start_server())
    except KeyboardInterrupt:
        print("\nShutting down server...")
