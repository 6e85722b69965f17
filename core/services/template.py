from core.serializers import TemplateSerializer, load


class TemplateService:
    def __init__(self, client):
        self.client = client

    def get_templates(self, board=None):
        params = {'board': board} if board else None
        return load(TemplateSerializer, self.client.get('/templates/', params=params), many=True)

    def get_template(self, code):
        return load(TemplateSerializer, self.client.get(f'/templates/{code}/'))

    def create_template(self, payload):
        return load(TemplateSerializer, self.client.post('/templates/', data=payload))

    def update_template(self, code, payload):
        return load(TemplateSerializer, self.client.patch(f'/templates/{code}/', data=payload))
