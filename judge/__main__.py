import uvicorn

from settings import SERVER_HOST, SERVER_PORT

if __name__ == '__main__':
    uvicorn.run('judge.main:create_app', factory=True, host=SERVER_HOST, port=SERVER_PORT)
