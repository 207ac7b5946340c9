import uvicorn


def run():
    uvicorn.run("pharmacy.main:create_app", factory=True, host="0.0.0.0", port=8080)


if __name__ == "__main__":
    run()
