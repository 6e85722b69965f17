from core.serializers import AcademicYearSerializer, BoardSerializer, load


class BoardService:
    def __init__(self, client):
        self.client = client

    def get_boards(self):
        return load(BoardSerializer, self.client.get('/boards/'), many=True)

    def get_board(self, code):
        return load(BoardSerializer, self.client.get(f'/boards/{code}/'))

    def get_academic_years(self):
        return load(AcademicYearSerializer, self.client.get('/academic-years/'), many=True)

    def get_current_academic_year(self):
        return load(AcademicYearSerializer, self.client.get('/academic-years/current/'))
