import json

import pytest
from troposphere import AWS_REGION, GetAtt, Join, Output, Ref
from troposphere.iam import InstanceProfile, Role
from troposphere.s3 import Bucket

from omega_deploy.domain.core.exceptions import GraphMutationError
from omega_deploy.domain.stack.resource_graph import (
    add_resources,
    dangling_references,
    dependencies,
    depends_on,
    new_template,
    references,
    referenced_names,
)


def _role(title='Role'):
    return Role(title, AssumeRolePolicyDocument={'Version': '2012-10-17', 'Statement': []})


class TestReferencedNames:
    def test_skips_pseudo_parameters(self):
        value = {
            'Roles': [{'Ref': 'Role'}],
            'Arn': Join(':', [Ref(AWS_REGION), GetAtt('Function', 'Arn')]).to_dict(),
        }
        assert sorted(referenced_names(value)) == ['Function', 'Role']

    def test_depends_on_accepts_a_single_name(self):
        bucket = Bucket('Bucket', DependsOn='Other')
        assert depends_on(bucket) == ['Other']
        assert depends_on(Bucket('Plain')) == []


class TestResourceGraph:
    def test_add_resources(self):
        template = new_template()
        add_resources(template, [Bucket('Bucket')])
        assert list(template.resources) == ['Bucket']

    def test_duplicate_name(self):
        template = new_template()
        add_resources(template, [Bucket('Bucket')])
        with pytest.raises(GraphMutationError) as exc_info:
            add_resources(template, [Bucket('Bucket')])
        assert exc_info.value.resource_names == ['Bucket']

    def test_add_resources_is_atomic(self):
        template = new_template()
        add_resources(template, [Bucket('Existing')])
        with pytest.raises(GraphMutationError):
            add_resources(template, [Bucket('New'), Bucket('Existing')])
        assert list(template.resources) == ['Existing']

    def test_add_resources_rejects_duplicates_within_batch(self):
        template = new_template()
        with pytest.raises(GraphMutationError):
            add_resources(template, [Bucket('Twice'), Bucket('Twice')])
        assert len(template.resources) == 0

    def test_dependencies_and_references(self):
        template = new_template()
        add_resources(template, [
            _role(),
            InstanceProfile('Profile', Roles=[Ref('Role')], DependsOn=['Lookup']),
        ])
        assert dependencies(template)['Profile'] == {'Lookup'}
        assert references(template)['Profile'] == {'Role'}
        assert dangling_references(template) == {'Profile': {'Lookup'}}

    def test_to_json(self):
        template = new_template('test')
        add_resources(template, [Bucket('Bucket')])
        template.add_output(Output('BucketName', Value=Ref('Bucket'), Description='The bucket'))
        document = json.loads(template.to_json())
        assert document['AWSTemplateFormatVersion'] == '2010-09-09'
        assert document['Description'] == 'test'
        assert document['Resources'] == {'Bucket': {'Type': 'AWS::S3::Bucket'}}
        assert document['Outputs']['BucketName'] == {'Value': {'Ref': 'Bucket'}, 'Description': 'The bucket'}

    def test_template_rejection_is_rolled_back(self, monkeypatch):
        template = new_template()
        original_add_resource = template.add_resource

        def add_resource(resource):
            if resource.title == 'Second':
                raise ValueError('Maximum number of resources 500 reached')
            return original_add_resource(resource)

        monkeypatch.setattr(template, 'add_resource', add_resource)
        with pytest.raises(GraphMutationError) as exc_info:
            add_resources(template, [Bucket('First'), Bucket('Second')])

        assert 'Maximum number of resources' in str(exc_info.value)
        assert exc_info.value.resource_names == ['First', 'Second']
        assert len(template.resources) == 0
