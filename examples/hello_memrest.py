import time

import memrest


def main() -> None:
    server = memrest.run(port=57793, open_browser=True)

    client = server.client() if isinstance(server, memrest.RestServer) else server
    ada = client.post("persons", {"firstName": "Ada", "lastName": "Lovelace"})
    client.put("persons", ada["id"], {"firstName": "Ada", "lastName": "Lovelace", "nickName": "Countess"})
    for person in client.list("persons"):
        print(person)

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass
    finally:
        if isinstance(server, memrest.RestServer):
            server.stop()


if __name__ == "__main__":
    main()
